# --------------------------------------------------------------------
# installer.py: Download the Ivy jar unless Ivy is already available.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
from typing import List

from .config import DEFAULTS, Config
from .ivy import IVY_CONFIGURE_CLASS
from .reports import RunReport
from .runner import TaskRunner
from .tasks import Command

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.installer")

IVY_VERSION = "2.4.0"


# --------------------------------------------------------------------
def ivy_jar_url(version: str = IVY_VERSION, repo_url: str = DEFAULTS["ivy.repo.url"]) -> str:
    return "%s/org/apache/ivy/ivy/%s/ivy-%s.jar" % (repo_url.rstrip("/"), version, version)


# --------------------------------------------------------------------
def install_commands(config: Config) -> List[Command]:
    return [
        Command("mkdir", {"dir": str(config.jar_dir)}),
        Command(
            "get",
            {"src": ivy_jar_url(IVY_VERSION, config.repo_url), "dest": str(config.jar_file)},
        ),
    ]


# --------------------------------------------------------------------
async def ensure_installed(config: Config, runner: TaskRunner) -> RunReport:
    """ Make the Ivy tasks available to the runner.

    Nothing is touched when the Ivy task classes already resolve on the
    runner's classpath.  Otherwise the jar directory is created and the
    version-pinned jar is fetched into it, replacing any existing file. """

    if runner.class_exists(IVY_CONFIGURE_CLASS):
        log.info("ivy installed")
        return RunReport("install")

    return await runner.run(install_commands(config), name="install")
