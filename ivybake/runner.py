# --------------------------------------------------------------------
# runner.py: Execute ordered commands against named tasks.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional, Type

from ansilog import dim, fg

from .classpath import Classpath
from .config import Config
from .ivy import TASK_CLASSES
from .reports import RunReport, StepResult
from .tasks import BUILTIN_TASKS, Command, Task
from .util import badge

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.runner")


# --------------------------------------------------------------------
class TaskRunner:
    """ Runs commands one at a time against built-in and defined tasks.

    Each command yields a `StepResult`.  A failing command stops the run
    unless its error policy allows the failure, see `Command.policy`. """

    def __init__(self, config: Config, classpath: Optional[Classpath] = None):
        self.config = config
        self._classpath = classpath
        self._tasks: Dict[str, Type[Task]] = dict(BUILTIN_TASKS)
        self.defined: Dict[str, str] = {}
        self.settings_file: Optional[Path] = None
        self.resolved_file: Optional[Path] = None

    @property
    def classpath(self) -> Classpath:
        if self._classpath is not None:
            return self._classpath
        return Classpath.for_config(self.config)

    def class_exists(self, classname: str) -> bool:
        return self.classpath.class_exists(classname)

    def taskdef(self, name: str, classname: str) -> StepResult:
        """ Bind a task name to the implementation of a class identifier. """
        started = datetime.now()
        if name in self._tasks:
            return StepResult.failure(name, "task '%s' is already defined" % name, started)
        if classname not in TASK_CLASSES:
            return StepResult.failure(name, "unsupported task class %s" % classname, started)
        if not self.class_exists(classname):
            return StepResult.failure(
                name, "class %s cannot be found on %r" % (classname, self.classpath), started
            )
        self._tasks[name] = TASK_CLASSES[classname]
        self.defined[name] = classname
        log.debug("%s defined as %s", name, classname)
        return StepResult.success(name, "taskdef %s" % classname, started)

    def is_defined(self, name: str) -> bool:
        return name in self._tasks

    async def execute(self, command: Command) -> StepResult:
        started = datetime.now()
        if command.task not in self._tasks:
            return StepResult.failure(
                command.task, "'%s' is not a defined task" % command.task, started
            )

        task = self._tasks[command.task](self, command.task)
        if not self.config.quiet:
            log.info(f"{badge(fg.cyan(command.task))} {dim(str(command))}")
        try:
            result = await task.execute(command)
        except Exception as e:
            if self.config.debug:
                log.exception("Exception details >>>")
            result = StepResult.failure(command.task, str(e) or repr(e), started)

        if not result.succeeded():
            if command.halts:
                log.error(f"{badge(fg.red(command.task))} {result.message}")
            else:
                log.warning(f"{badge(fg.yellow(command.task))} {result.message} (continuing)")
        return result

    async def run(self, commands: Iterable[Command], name: str = "run") -> RunReport:
        report = RunReport(name)
        for command in commands:
            result = await self.execute(command)
            report.add(result)
            if not result.succeeded() and command.halts:
                report.halted = True
                break
        return report
