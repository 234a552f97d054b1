# --------------------------------------------------------------------
# tasks.py: Command descriptors and the built-in tasks.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import asyncio
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import requests

from .config import Config
from .reports import StepResult

if TYPE_CHECKING:
    from .runner import TaskRunner

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.tasks")

CHUNK_SIZE = 64 * 1024


# --------------------------------------------------------------------
class ErrorPolicy(Enum):
    HALT = "halt"
    CONTINUE = "continue"
    IGNORE_MISSING = "ignore-missing"


# --------------------------------------------------------------------
@dataclass(frozen=True)
class Command:
    """ A single invocation of a named task with its options. """

    task: str
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def policy(self) -> ErrorPolicy:
        if self.options.get("haltonfailure", True) is False:
            return ErrorPolicy.CONTINUE
        if self.options.get("quiet", False):
            return ErrorPolicy.IGNORE_MISSING
        return ErrorPolicy.HALT

    @property
    def halts(self) -> bool:
        return self.policy is not ErrorPolicy.CONTINUE

    def option(self, key: str) -> Any:
        try:
            return self.options[key]
        except KeyError:
            raise ValueError(
                "Task '%s' requires the '%s' option." % (self.task, key)
            ) from None

    def __str__(self):
        options = " ".join("%s=%s" % (k, v) for k, v in self.options.items())
        return "%s %s" % (self.task, options) if options else self.task


# --------------------------------------------------------------------
class Task:
    """ Base class for the implementations bound to task names. """

    def __init__(self, runner: "TaskRunner", name: str):
        self.runner = runner
        self.name = name

    @property
    def config(self) -> Config:
        return self.runner.config

    async def execute(self, command: Command) -> StepResult:
        raise NotImplementedError()


# --------------------------------------------------------------------
class MkdirTask(Task):
    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        path = self.config.resolve_path(command.option("dir"))
        if path.is_dir():
            return StepResult.success(self.name, "%s exists" % path, started)
        path.mkdir(parents=True, exist_ok=True)
        return StepResult.success(self.name, "created %s" % path, started)


# --------------------------------------------------------------------
class DeleteTask(Task):
    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        path = self.config.resolve_path(command.option("dir"))
        if not path.exists():
            if command.policy is ErrorPolicy.IGNORE_MISSING:
                return StepResult.success(self.name, "%s not found, ignored" % path, started)
            return StepResult.failure(self.name, "%s not found" % path, started)
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
        return StepResult.success(self.name, "deleted %s" % path, started)


# --------------------------------------------------------------------
class GetTask(Task):
    """ Fetch a remote file, overwriting any existing destination.

    The transfer runs in the loop's default executor.  Content is not
    verified against a checksum or signature. """

    def download(self, src: str, dest: Path):
        with requests.get(src, stream=True, timeout=self.config.http_timeout) as response:
            response.raise_for_status()
            try:
                with open(dest, "wb") as outfile:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        outfile.write(chunk)
            except BaseException:
                dest.unlink(missing_ok=True)
                raise

    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        src = command.option("src")
        dest = self.config.resolve_path(command.option("dest"))
        log.info("Getting %s", src)
        log.debug("To %s", dest)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.download, src, dest)
        return StepResult.success(self.name, "%s -> %s" % (src, dest), started)


# --------------------------------------------------------------------
BUILTIN_TASKS = {
    "mkdir": MkdirTask,
    "delete": DeleteTask,
    "get": GetTask,
}
