# --------------------------------------------------------------------
# classpath.py: Locate Java classes in directories and jar files.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import os
import zipfile
from pathlib import Path
from typing import Iterable, List

from .config import Config
from .util import uniq_list

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.classpath")


# --------------------------------------------------------------------
def class_entry(classname: str) -> str:
    """ 'org.example.Foo' -> 'org/example/Foo.class' """
    return classname.replace(".", "/") + ".class"


# --------------------------------------------------------------------
class Classpath:
    def __init__(self, entries: Iterable[Path]):
        self.entries: List[Path] = uniq_list(Path(e) for e in entries)

    @classmethod
    def for_config(cls, config: Config) -> "Classpath":
        """The Ivy jar file, any jars in the Ivy jar directory, then the
        entries of the `CLASSPATH` environment variable."""
        entries = [config.jar_file]
        if config.jar_dir.is_dir():
            entries.extend(sorted(config.jar_dir.glob("*.jar")))
        for entry in os.environ.get("CLASSPATH", "").split(os.pathsep):
            if entry:
                entries.append(config.resolve_path(entry))
        return cls(entries)

    def class_exists(self, classname: str) -> bool:
        name = class_entry(classname)
        for entry in self.entries:
            if entry.is_dir():
                if (entry / name).is_file():
                    return True
            elif entry.is_file() and self._jar_contains(entry, name):
                return True
        return False

    def _jar_contains(self, jar: Path, name: str) -> bool:
        try:
            with zipfile.ZipFile(jar) as archive:
                return name in archive.namelist()
        except zipfile.BadZipFile:
            log.warning("Skipping unreadable classpath entry: %s", jar)
            return False

    def to_param(self) -> str:
        """ The entries joined for a `java -cp` argument. """
        return os.pathsep.join(str(e) for e in self.entries)

    def __repr__(self):
        return "<Classpath %s>" % self.to_param()
