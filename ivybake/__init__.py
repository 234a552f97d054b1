# -------------------------------------------------------------------
# ivybake: Install Apache Ivy and stage project dependencies.
#
# Released under the MIT license.
# -------------------------------------------------------------------
from .build import BuildEngine, recipe
from .bake import build, main
from .classpath import Classpath
from .config import Config
from .errors import BuildError, ConfigError, InvalidTargetError
from .installer import IVY_VERSION, ensure_installed, ivy_jar_url
from .recipes import Recipe, ReportRecipe, SequenceRecipe
from .registrar import IVY_TASKS, TaskDescriptor, register_tasks
from .reports import BuildReport, RunReport, StepResult
from .runner import TaskRunner
from .tasks import Command, ErrorPolicy
