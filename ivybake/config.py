# --------------------------------------------------------------------
# config.py: ivybake configuration options.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import argparse
import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Optional

import ansilog

from .errors import ConfigError

# --------------------------------------------------------------------
HELP = """
# ivybake: Prepare project dependencies with Apache Ivy.
## Usage: `ivybake [OPTION]... [TARGET]...`
Install Ivy if needed, then configure, resolve and retrieve the dependencies
declared in `ivy.xml` into `target/lib`.

## Targets
- `install`: Download the Ivy jar unless the Ivy tasks are already on the
  classpath.
- `tasks`: Define and run the `ivy-configure`, `ivy-resolve` and
  `ivy-retrieve` tasks.
- `setup`: `install`, then `tasks`.  This is the default.

### Modes
- `-l, --list`: List available targets.
- `--tree`: Print a tree illustrating the dependencies of the given
  (or default) target.

## Options
- `-C, --dir DIR`: Resolve relative paths against DIR instead of the
  current directory.
- `-P, --properties FILE`: Read properties from FILE.  Defaults to
  `{properties_file}` in the base directory, if it exists.
- `-d, --define KEY=VALUE`: Override a property.  May be repeated.
- `--report FILE`: Write a JSON report of every executed step to FILE.
- `-v, --verbose`: Print the output of the Ivy commands.
- `-q, --quiet`: Print nothing unless something goes wrong.
- `-D, --debug`: Print copious amounts of diagnostic info, including stack
  traces for build errors.  Can also be enabled by setting the
  `IVYBAKE_DEBUG` environment variable.

## Properties
{properties}
""".strip()

DEFAULT_PROPERTIES_FILE = "build.properties"

DEFAULTS: Dict[str, str] = {
    "ivy.jar.dir": "ivy",
    "ivy.jar.file": "${ivy.jar.dir}/ivy.jar",
    "ivy.repo.url": "http://repo2.maven.org/maven2",
    "ivy.settings.file": "ivysettings.xml",
    "ivy.dep.file": "ivy.xml",
    "ivy.lib.dir": "target/lib",
    "ivy.retrieve.pattern": "${ivy.lib.dir}/default/[module]-[revision].[ext]",
    "ivy.retrieve.confs": "*",
    "java.command": "java",
    "http.timeout": "60",
}

_REFERENCE = re.compile(r"\$\{([^}]+)\}")
_MAX_EXPANSION_DEPTH = 16


# --------------------------------------------------------------------
def parse_properties(text: str) -> Dict[str, str]:
    """Parse Java-style `key=value` properties.  Blank lines and lines
    starting with `#` or `!` are ignored; `:` or whitespace may also
    separate the key from the value."""
    result = {}
    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        match = re.match(r"([^=:\s]+)(?:\s*[=:\s]\s*(.*))?$", line)
        if match is None:
            raise ConfigError("Malformed property on line %d: %r" % (lineno, line))
        result[match.group(1)] = match.group(2) or ""
    return result


# --------------------------------------------------------------------
class Config:
    """ Defines the command line parameters and the build properties."""

    _instance: Optional["Config"] = None
    _loggers: Dict[str, logging.Logger] = {}

    def __init__(self, base_dir: Optional[Path] = None):
        self.targets: List[str] = []
        self.help = False
        self.verbose = False
        self.quiet = False
        self.print_tree = False
        self.list_targets = False
        self.debug = "IVYBAKE_DEBUG" in os.environ
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.properties_file: Optional[str] = None
        self.defines: List[str] = []
        self.report_file: Optional[str] = None
        self.properties: Dict[str, str] = dict(DEFAULTS)

    def print_help(self):
        properties = "\n".join(
            "- `%s` (default: `%s`)" % (key, value) for key, value in DEFAULTS.items()
        )
        self.get_logger("ivybake.config").info(
            HELP.format(properties_file=DEFAULT_PROPERTIES_FILE, properties=properties)
        )

    @property
    def log_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        if self.quiet:
            return logging.WARNING
        return logging.INFO

    def get_logger(self, name: str) -> logging.Logger:
        logger = ansilog.getLogger(name)
        ansilog.handler.setLevel(self.log_level)
        logger.setLevel(self.log_level)
        Config._loggers[name] = logger
        return logger

    def update_log_levels(self):
        """ Apply this configuration's level to every ivybake logger. """
        ansilog.handler.setLevel(self.log_level)
        for logger in self._loggers.values():
            logger.setLevel(self.log_level)

    # ----------------------------------------------------------------
    def set(self, key: str, value: str):
        if key not in DEFAULTS:
            self.get_logger("ivybake.config").warning(
                "Ignoring unknown property '%s'.", key
            )
            return
        self.properties[key] = value

    def update(self, properties: Dict[str, str]):
        for key, value in properties.items():
            self.set(key, value)

    def prop(self, key: str) -> str:
        """Get the value of a property with all `${key}` references
        expanded."""
        if key not in self.properties:
            raise ConfigError("Unknown property '%s'." % key)
        return self._expand(self.properties[key], 0)

    def _expand(self, value: str, depth: int) -> str:
        if depth > _MAX_EXPANSION_DEPTH:
            raise ConfigError("Circular property reference in '%s'." % value)

        def replace(match):
            name = match.group(1)
            if name not in self.properties:
                return match.group(0)
            return self._expand(self.properties[name], depth + 1)

        return _REFERENCE.sub(replace, value)

    def resolve_path(self, value) -> Path:
        path = Path(value)
        if path.is_absolute():
            return path
        return self.base_dir / path

    # ----------------------------------------------------------------
    @property
    def jar_dir(self) -> Path:
        return self.resolve_path(self.prop("ivy.jar.dir"))

    @property
    def jar_file(self) -> Path:
        return self.resolve_path(self.prop("ivy.jar.file"))

    @property
    def repo_url(self) -> str:
        return self.prop("ivy.repo.url").rstrip("/")

    @property
    def settings_file(self) -> Path:
        return self.resolve_path(self.prop("ivy.settings.file"))

    @property
    def dep_file(self) -> Path:
        return self.resolve_path(self.prop("ivy.dep.file"))

    @property
    def lib_dir(self) -> Path:
        return self.resolve_path(self.prop("ivy.lib.dir"))

    @property
    def java_command(self) -> str:
        return self.prop("java.command")

    @property
    def http_timeout(self) -> float:
        try:
            return float(self.prop("http.timeout"))
        except ValueError as e:
            raise ConfigError("'http.timeout' must be a number of seconds.") from e

    # ----------------------------------------------------------------
    def load_properties(self, path: Optional[Path] = None) -> "Config":
        """Load the given properties file, or the default one from the
        base directory if it exists."""
        if path is None:
            path = self.base_dir / DEFAULT_PROPERTIES_FILE
            if not path.exists():
                return self
        path = Path(path)
        if not path.exists():
            raise ConfigError("Properties file not found: %s" % path)
        self.update(parse_properties(path.read_text(encoding="utf-8")))
        return self

    @classmethod
    def get_parser(cls, desc) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog="ivybake", description=desc, add_help=False)
        parser.add_argument("targets", nargs="*", default=None)
        parser.add_argument("--help", "-h", dest="help", action="store_true")
        parser.add_argument("--verbose", "-v", dest="verbose", action="store_true")
        parser.add_argument("--quiet", "-q", dest="quiet", action="store_true")
        parser.add_argument("--tree", dest="print_tree", action="store_true")
        parser.add_argument("--list", "-l", dest="list_targets", action="store_true")
        parser.add_argument("--debug", "-D", dest="debug", action="store_true")
        parser.add_argument("--dir", "-C", dest="base_dir", type=Path)
        parser.add_argument("--properties", "-P", dest="properties_file")
        parser.add_argument("--define", "-d", dest="defines", action="append", default=[])
        parser.add_argument("--report", dest="report_file")
        return parser

    @classmethod
    def get(cls) -> "Config":
        if cls._instance is None:
            cls._instance = Config()
        return cls._instance

    def load(self, argv: Optional[List[str]] = None, desc="Ivy dependency setup") -> "Config":
        parser = self.get_parser(desc)
        parser.parse_args(argv, namespace=self)
        self.base_dir = self.base_dir.resolve()
        self.update_log_levels()

        self.load_properties(self.properties_file)
        for define in self.defines:
            key, sep, value = define.partition("=")
            if not sep:
                raise ConfigError("Expected KEY=VALUE, got '%s'." % define)
            self.set(key.strip(), value.strip())
        return self
