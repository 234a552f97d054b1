# --------------------------------------------------------------------
# test_config.py
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------

import unittest
from pathlib import Path

from ivybake.config import Config, parse_properties
from ivybake.errors import ConfigError

from .support import WorkspaceTestCase


# --------------------------------------------------------------------
class ParsePropertiesTests(unittest.TestCase):
    def test_separators_and_comments(self):
        props = parse_properties(
            "# comment\n"
            "! also a comment\n"
            "\n"
            "ivy.jar.dir = lib/ivy\n"
            "ivy.lib.dir: deps\n"
            "java.command /opt/jdk/bin/java\n"
            "ivy.retrieve.confs\n"
        )
        self.assertEqual(props, {
            "ivy.jar.dir": "lib/ivy",
            "ivy.lib.dir": "deps",
            "java.command": "/opt/jdk/bin/java",
            "ivy.retrieve.confs": "",
        })

    def test_malformed(self):
        with self.assertRaises(ConfigError):
            parse_properties("=value\n")


# --------------------------------------------------------------------
class ConfigTests(WorkspaceTestCase):
    def test_defaults(self):
        self.assertEqual(self.config.jar_dir, self.base / "ivy")
        self.assertEqual(self.config.jar_file, self.base / "ivy" / "ivy.jar")
        self.assertEqual(self.config.settings_file, self.base / "ivysettings.xml")
        self.assertEqual(self.config.dep_file, self.base / "ivy.xml")
        self.assertEqual(self.config.lib_dir, self.base / "target" / "lib")
        self.assertEqual(
            self.config.prop("ivy.retrieve.pattern"),
            "target/lib/default/[module]-[revision].[ext]",
        )
        self.assertEqual(self.config.repo_url, "http://repo2.maven.org/maven2")

    def test_references_follow_overrides(self):
        self.config.set("ivy.jar.dir", "tools")
        self.config.set("ivy.lib.dir", "build/deps")
        self.assertEqual(self.config.jar_file, self.base / "tools" / "ivy.jar")
        self.assertEqual(
            self.config.prop("ivy.retrieve.pattern"),
            "build/deps/default/[module]-[revision].[ext]",
        )

    def test_circular_reference(self):
        self.config.set("ivy.jar.dir", "${ivy.jar.file}")
        with self.assertRaises(ConfigError):
            self.config.prop("ivy.jar.file")

    def test_unknown_property_ignored(self):
        self.config.set("no.such.key", "value")
        self.assertNotIn("no.such.key", self.config.properties)
        with self.assertRaises(ConfigError):
            self.config.prop("no.such.key")

    def test_absolute_paths_kept(self):
        self.config.set("ivy.jar.file", "/opt/ivy/ivy.jar")
        self.assertEqual(self.config.jar_file, Path("/opt/ivy/ivy.jar"))

    def test_bad_timeout(self):
        self.config.set("http.timeout", "soon")
        with self.assertRaises(ConfigError):
            self.config.http_timeout

    def test_load_default_properties_file(self):
        (self.base / "build.properties").write_text("ivy.jar.dir=vendor\n")
        self.config.load([])
        self.assertEqual(self.config.jar_file, self.base.resolve() / "vendor" / "ivy.jar")

    def test_defines_override_properties_file(self):
        (self.base / "custom.properties").write_text("ivy.lib.dir=from-file\n")
        config = Config(base_dir=self.base).load([
            "--properties", str(self.base / "custom.properties"),
            "-d", "ivy.lib.dir=from-cli",
            "install",
        ])
        self.assertEqual(config.targets, ["install"])
        self.assertEqual(config.prop("ivy.lib.dir"), "from-cli")

    def test_dir_option(self):
        config = Config().load(["--dir", str(self.base)])
        self.assertEqual(config.base_dir, self.base.resolve())

    def test_missing_properties_file(self):
        with self.assertRaises(ConfigError):
            Config(base_dir=self.base).load(["-P", str(self.base / "missing.properties")])

    def test_malformed_define(self):
        with self.assertRaises(ConfigError):
            Config(base_dir=self.base).load(["-d", "ivy.lib.dir"])


# --------------------------------------------------------------------
if __name__ == "__main__":
    unittest.main()
