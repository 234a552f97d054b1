# --------------------------------------------------------------------
# targets.py: The install, tasks and setup build targets.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
from .build import BuildEngine, recipe
from .config import Config
from .installer import ensure_installed
from .recipes import SequenceRecipe
from .registrar import register_tasks
from .runner import TaskRunner

DEFAULT_TARGET = "setup"


# --------------------------------------------------------------------
def define_targets(engine: BuildEngine, settings: Config) -> BuildEngine:
    settings.update_log_levels()

    @engine.provide
    def config():
        return settings

    @engine.provide
    def runner(config):
        return TaskRunner(config)

    @engine.target
    def install(config, runner):
        return recipe(ensure_installed)(config, runner).using(config)

    @engine.target
    def tasks(config, runner):
        return recipe(register_tasks)(runner).using(config)

    @engine.target
    def setup(config, install, tasks):
        return SequenceRecipe([install, tasks]).using(config)

    return engine
