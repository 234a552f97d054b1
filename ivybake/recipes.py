# --------------------------------------------------------------------
# recipes.py: Recipe base classes and utilities.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from ansilog import dim, fg

from .config import Config
from .errors import BuildError
from .reports import RunReport
from .util import badge

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.recipes")

ReportFunction = Callable[..., Awaitable[RunReport]]


# --------------------------------------------------------------------
def if_not_quiet(f):
    def wrapper(self, *args, **kwargs):
        if not self.config.quiet:
            f(self, *args, **kwargs)

    return wrapper


# --------------------------------------------------------------------
class Recipe:
    """ Represents a repeatable process. """

    def __init__(self, input: Optional[List["Recipe"]] = None):
        self._deps: List["Recipe"] = input or []
        self.name: Optional[str] = None
        self.target = False
        self.done = False
        self.config = Config.get()
        self._lock = asyncio.Lock()

    def using(self, config: Config) -> "Recipe":
        """ Log according to the given configuration instead of the global one. """
        self.config = config
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.__class__.__name__

    @property
    def ansi_display_name(self) -> str:
        color = fg.cyan if self.target else dim
        display_name = str(color(self.display_name))
        if self.config.debug:
            display_name = f"{display_name} ({dim(self.__class__.__name__)})"
        return display_name

    @if_not_quiet
    def log_start(self):
        if self.target:
            log.info(f"{badge(self.ansi_display_name)} start")

    def log_error(self, msg, *args):
        log.error(f"{badge(fg.red(self.display_name))} {msg}", *args)

    @if_not_quiet
    def log_ok(self):
        if self.target:
            log.info(f"{badge(fg.green(self.display_name))} ok")

    @property
    def is_done(self) -> bool:
        return self.done

    @property
    def dependencies(self) -> List["Recipe"]:
        """List of the recipes that must be completed, in order, before this
        recipe can be executed."""
        return self._deps

    async def make(self):
        """ Execute this recipe. """
        raise NotImplementedError()

    async def resolve_deps(self):
        """ Make all dependencies of this recipe, one after another. """
        for recipe in self.dependencies:
            await recipe.resolve()

    async def resolve(self):
        """ Execute this recipe and all its dependencies, if any. """
        async with self._lock:
            if not self.is_done:
                try:
                    self.log_start()
                    await self.resolve_deps()
                    await self.make()
                    self.done = True
                    self.log_ok()

                except Exception as e:
                    self.log_error(str(e))
                    raise e

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.display_name}>"


# --------------------------------------------------------------------
class ReportRecipe(Recipe):
    """A recipe running a coroutine function that returns a `RunReport`.
    The recipe fails if the run halted."""

    def __init__(self, f: ReportFunction, *args: Any, **kwargs: Any):
        super().__init__()
        self._f = f
        self.args = [*args]
        self.kwargs = {**kwargs}
        self.report: Optional[RunReport] = None

    async def make(self):
        self.report = await self._f(*self.args, **self.kwargs)
        if self.report.halted:
            failed = self.report.failures[-1]
            raise BuildError("%s failed: %s" % (failed.name, failed.message))

    @property
    def reports(self) -> List[RunReport]:
        return [self.report] if self.report is not None else []


# --------------------------------------------------------------------
class SequenceRecipe(Recipe):
    def __init__(self, recipes: Iterable[Recipe]):
        super().__init__(list(recipes))

    async def make(self):
        pass

    def __iter__(self):
        return iter(self._deps)
