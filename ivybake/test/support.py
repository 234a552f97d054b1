# --------------------------------------------------------------------
# support.py: Fixtures shared by the ivybake tests.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------

import functools
import os
import stat
import tempfile
import threading
import unittest
import zipfile
from contextlib import contextmanager
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Iterable
from unittest import mock

from ivybake.config import Config
from ivybake.ivy import IVY_CONFIGURE_CLASS, IVY_RESOLVE_CLASS, IVY_RETRIEVE_CLASS

IVY_CLASSES = (IVY_CONFIGURE_CLASS, IVY_RESOLVE_CLASS, IVY_RETRIEVE_CLASS)

FAKE_JAVA = """#!/bin/sh
echo "$@" >> '{log}'
retrieve=""
prev=""
for arg in "$@"; do
    if [ "$prev" = "-retrieve" ]; then
        retrieve="$arg"
    fi
    prev="$arg"
done
if [ -z "$retrieve" ]; then
    if [ {resolve_code} -ne 0 ]; then
        echo "unresolved dependency: org.example#missing;1.0" >&2
    fi
    exit {resolve_code}
fi
out=$(echo "$retrieve" | sed -e 's/\\[module\\]/demo/' -e 's/\\[revision\\]/1.0/' -e 's/\\[ext\\]/jar/')
mkdir -p "$(dirname "$out")"
echo fake > "$out"
exit {retrieve_code}
"""


# --------------------------------------------------------------------
def make_jar(path: Path, classes: Iterable[str] = IVY_CLASSES) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        for classname in classes:
            archive.writestr(classname.replace(".", "/") + ".class", b"\xca\xfe\xba\xbe")
    return path


# --------------------------------------------------------------------
def write_fake_java(path: Path, log: Path, resolve_code=0, retrieve_code=0) -> Path:
    """Write a shell script standing in for `java`.  It appends its
    arguments to `log` and, when given `-retrieve PATTERN`, writes one
    artifact named after the pattern."""
    path.write_text(
        FAKE_JAVA.format(log=log, resolve_code=resolve_code, retrieve_code=retrieve_code)
    )
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# --------------------------------------------------------------------
class QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        pass


# --------------------------------------------------------------------
@contextmanager
def serve_directory(directory: Path):
    handler = functools.partial(QuietHandler, directory=str(directory))
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield "http://127.0.0.1:%d" % server.server_address[1]
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


# --------------------------------------------------------------------
class WorkspaceTestCase(unittest.TestCase):
    """Runs each test in an empty project directory with a fresh config and
    no inherited `CLASSPATH`."""

    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tempdir.name)
        self.config = Config(base_dir=self.base)
        self.config.quiet = True
        self.config.update_log_levels()
        self.env = mock.patch.dict(os.environ, {"CLASSPATH": ""})
        self.env.start()

    def tearDown(self):
        self.env.stop()
        self.tempdir.cleanup()
        Config.get().update_log_levels()

    def write_project(self):
        (self.base / "ivysettings.xml").write_text("<ivysettings/>\n")
        (self.base / "ivy.xml").write_text(
            '<ivy-module version="2.0"><info organisation="org.example" module="demo"/></ivy-module>\n'
        )

    def use_fake_java(self, resolve_code=0, retrieve_code=0) -> Path:
        log = self.base / "java.log"
        script = write_fake_java(
            self.base / "fake-java", log, resolve_code, retrieve_code
        )
        self.config.set("java.command", str(script))
        return log
