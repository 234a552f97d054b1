# --------------------------------------------------------------------
# registrar.py: Define the Ivy tasks and run each one as it is defined.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
from dataclasses import dataclass
from typing import Callable, List, Sequence

from .config import Config
from .ivy import IVY_CONFIGURE_CLASS, IVY_RESOLVE_CLASS, IVY_RETRIEVE_CLASS
from .reports import RunReport
from .runner import TaskRunner
from .tasks import Command

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.registrar")


# --------------------------------------------------------------------
@dataclass(frozen=True)
class TaskDescriptor:
    name: str
    classname: str
    then: Callable[[str, Config], List[Command]]


# --------------------------------------------------------------------
def configure_commands(name: str, config: Config) -> List[Command]:
    return [Command(name, {"file": config.prop("ivy.settings.file")})]


# --------------------------------------------------------------------
def resolve_commands(name: str, config: Config) -> List[Command]:
    return [Command(name, {"file": config.prop("ivy.dep.file"), "haltonfailure": False})]


# --------------------------------------------------------------------
def retrieve_commands(name: str, config: Config) -> List[Command]:
    lib_dir = config.prop("ivy.lib.dir")
    return [
        Command("delete", {"dir": lib_dir, "quiet": True}),
        Command("mkdir", {"dir": lib_dir}),
        Command(
            name,
            {
                "conf": config.prop("ivy.retrieve.confs"),
                "pattern": config.prop("ivy.retrieve.pattern"),
            },
        ),
    ]


# --------------------------------------------------------------------
IVY_TASKS = [
    TaskDescriptor("ivy-configure", IVY_CONFIGURE_CLASS, configure_commands),
    TaskDescriptor("ivy-resolve", IVY_RESOLVE_CLASS, resolve_commands),
    TaskDescriptor("ivy-retrieve", IVY_RETRIEVE_CLASS, retrieve_commands),
]


# --------------------------------------------------------------------
async def register_tasks(
    runner: TaskRunner, descriptors: Sequence[TaskDescriptor] = IVY_TASKS
) -> RunReport:
    """Define each task in order, immediately running the commands bound
    to it.  Stops at the first definition that fails or the first run
    that halts."""
    report = RunReport("tasks")
    for descriptor in descriptors:
        result = runner.taskdef(descriptor.name, descriptor.classname)
        report.add(result)
        if not result.succeeded():
            log.error("Cannot define %s: %s", descriptor.name, result.message)
            report.halted = True
            break

        report.extend(
            await runner.run(descriptor.then(descriptor.name, runner.config), descriptor.name)
        )
        if report.halted:
            break
    return report
