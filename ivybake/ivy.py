# --------------------------------------------------------------------
# ivy.py: Tasks backed by the Apache Ivy standalone command line.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Type

from ansilog import dim

from .config import Config
from .reports import StepResult
from .shell import ShellResult, run_command
from .tasks import Command, Task
from .util import badge

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.ivy")

IVY_MAIN_CLASS = "org.apache.ivy.Main"
IVY_CONFIGURE_CLASS = "org.apache.ivy.ant.IvyConfigure"
IVY_RESOLVE_CLASS = "org.apache.ivy.ant.IvyResolve"
IVY_RETRIEVE_CLASS = "org.apache.ivy.ant.IvyRetrieve"


# --------------------------------------------------------------------
def split_confs(conf: str) -> List[str]:
    return [c.strip() for c in conf.split(",") if c.strip()]


# --------------------------------------------------------------------
class IvyTask(Task):
    def java_argv(self, *args: str) -> List[str]:
        return [
            self.config.java_command,
            "-cp",
            self.runner.classpath.to_param(),
            IVY_MAIN_CLASS,
            *args,
        ]

    def settings_args(self) -> List[str]:
        if self.runner.settings_file is None:
            return []
        return ["-settings", str(self.runner.settings_file)]

    def manifest(self, command: Command) -> Path:
        if "file" in command.options:
            return self.config.resolve_path(command.options["file"])
        if self.runner.resolved_file is not None:
            return self.runner.resolved_file
        return self.config.dep_file

    def echo(self, result: ShellResult, force=False):
        if not (self.config.verbose or force):
            return
        for line in result.stdout:
            log.info("%s %s", badge(dim(self.name)), line)
        for line in result.stderr:
            log.warning("%s %s", badge(dim(self.name)), line)

    async def invoke(self, args: List[str], started: datetime) -> StepResult:
        result = await run_command(self.java_argv(*args), cwd=self.config.base_dir)
        self.echo(result, force=not result.succeeded)
        if not result.succeeded:
            detail = result.stderr[-1] if result.stderr else "no output"
            return StepResult.failure(
                self.name,
                "ivy exited with %d: %s" % (result.returncode, detail),
                started,
            )
        return StepResult.success(self.name, " ".join(args), started)


# --------------------------------------------------------------------
class IvyConfigure(IvyTask):
    """ Select the settings file used by later Ivy invocations. """

    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        path = self.config.resolve_path(command.options.get("file", self.config.settings_file))
        if not path.is_file():
            return StepResult.failure(
                self.name, "settings file does not exist: %s" % path, started
            )
        self.runner.settings_file = path
        return StepResult.success(self.name, "using settings %s" % path, started)


# --------------------------------------------------------------------
class IvyResolve(IvyTask):
    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        manifest = self.manifest(command)
        if not manifest.is_file():
            return StepResult.failure(
                self.name, "ivy file does not exist: %s" % manifest, started
            )

        args = [*self.settings_args(), "-ivy", str(manifest)]
        conf: Optional[str] = command.options.get("conf")
        if conf:
            args.extend(["-confs", *split_confs(conf)])

        result = await self.invoke(args, started)
        if result.succeeded():
            self.runner.resolved_file = manifest
        return result


# --------------------------------------------------------------------
class IvyRetrieve(IvyTask):
    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        pattern = command.options.get("pattern", self.config.prop("ivy.retrieve.pattern"))
        conf = command.options.get("conf", self.config.prop("ivy.retrieve.confs"))
        args = [
            *self.settings_args(),
            "-ivy",
            str(self.manifest(command)),
            "-confs",
            *split_confs(conf),
            "-retrieve",
            pattern,
        ]
        return await self.invoke(args, started)


# --------------------------------------------------------------------
TASK_CLASSES: Dict[str, Type[Task]] = {
    IVY_CONFIGURE_CLASS: IvyConfigure,
    IVY_RESOLVE_CLASS: IvyResolve,
    IVY_RETRIEVE_CLASS: IvyRetrieve,
}
