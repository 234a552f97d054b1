# --------------------------------------------------------------------
# test_tasks.py
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------

import asyncio
import threading
import unittest
from unittest import mock

import requests

from ivybake.runner import TaskRunner
from ivybake.tasks import Command, DeleteTask, ErrorPolicy, GetTask, MkdirTask

from .support import WorkspaceTestCase, serve_directory


# --------------------------------------------------------------------
class CommandTests(unittest.TestCase):
    def test_policy(self):
        self.assertIs(Command("mkdir", {"dir": "x"}).policy, ErrorPolicy.HALT)
        self.assertIs(
            Command("ivy-resolve", {"file": "ivy.xml", "haltonfailure": False}).policy,
            ErrorPolicy.CONTINUE,
        )
        self.assertIs(
            Command("delete", {"dir": "x", "quiet": True}).policy,
            ErrorPolicy.IGNORE_MISSING,
        )
        self.assertTrue(Command("delete", {"dir": "x", "quiet": True}).halts)
        self.assertFalse(Command("ivy-resolve", {"haltonfailure": False}).halts)

    def test_missing_option(self):
        with self.assertRaises(ValueError):
            Command("mkdir").option("dir")

    def test_str(self):
        self.assertEqual(str(Command("mkdir", {"dir": "target/lib"})), "mkdir dir=target/lib")
        self.assertEqual(str(Command("ivy-configure")), "ivy-configure")


# --------------------------------------------------------------------
class BuiltinTaskTests(WorkspaceTestCase):
    def setUp(self):
        super().setUp()
        self.runner = TaskRunner(self.config)

    def execute(self, task_class, command):
        return asyncio.run(task_class(self.runner, command.task).execute(command))

    def test_mkdir(self):
        result = self.execute(MkdirTask, Command("mkdir", {"dir": "a/b"}))
        self.assertTrue(result.succeeded())
        self.assertTrue((self.base / "a" / "b").is_dir())

        result = self.execute(MkdirTask, Command("mkdir", {"dir": "a/b"}))
        self.assertTrue(result.succeeded())
        self.assertIn("exists", result.message)

    def test_delete(self):
        (self.base / "lib" / "default").mkdir(parents=True)
        (self.base / "lib" / "default" / "old.jar").write_text("old")
        result = self.execute(DeleteTask, Command("delete", {"dir": "lib", "quiet": True}))
        self.assertTrue(result.succeeded())
        self.assertFalse((self.base / "lib").exists())

    def test_delete_missing_quietly(self):
        result = self.execute(DeleteTask, Command("delete", {"dir": "lib", "quiet": True}))
        self.assertTrue(result.succeeded())
        self.assertIn("ignored", result.message)

    def test_delete_missing(self):
        result = self.execute(DeleteTask, Command("delete", {"dir": "lib"}))
        self.assertFalse(result.succeeded())
        self.assertIn("not found", result.message)

    def test_get_overwrites(self):
        served = self.base / "served"
        served.mkdir()
        (served / "thing.bin").write_bytes(b"new content")
        (self.base / "thing.bin").write_bytes(b"old")

        with serve_directory(served) as url:
            result = self.execute(
                GetTask,
                Command("get", {"src": url + "/thing.bin", "dest": "thing.bin"}),
            )
        self.assertTrue(result.succeeded())
        self.assertEqual((self.base / "thing.bin").read_bytes(), b"new content")

    def test_get_http_error(self):
        served = self.base / "served"
        served.mkdir()
        with serve_directory(served) as url:
            with self.assertRaises(requests.HTTPError):
                self.execute(
                    GetTask,
                    Command("get", {"src": url + "/missing.bin", "dest": "missing.bin"}),
                )
        self.assertFalse((self.base / "missing.bin").exists())

    def test_get_leaves_loop_thread(self):
        threads = []

        def download(task, src, dest):
            threads.append(threading.get_ident())

        with mock.patch.object(GetTask, "download", autospec=True, side_effect=download):
            result = self.execute(
                GetTask,
                Command("get", {"src": "http://example.invalid/a.jar", "dest": "a.jar"}),
            )
        self.assertTrue(result.succeeded())
        self.assertEqual(len(threads), 1)
        self.assertNotEqual(threads[0], threading.get_ident())


# --------------------------------------------------------------------
if __name__ == "__main__":
    unittest.main()
