# --------------------------------------------------------------------
# build.py: Apply build logic to a Xeno injector.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import asyncio
from typing import List, Optional

import xeno
from tree_format import format_tree

from .config import Config
from .errors import BuildError, InvalidTargetError
from .recipes import Recipe, ReportRecipe, SequenceRecipe
from .reports import RunReport

# --------------------------------------------------------------------
log = Config.get().get_logger("ivybake.build")


# --------------------------------------------------------------------
def recipe(f):
    """ A decorator for coroutine functions returning a `RunReport`.

    See the docs for `ivybake.recipes.ReportRecipe` for more info. """

    def wrapper(*args, **kwargs):
        result = ReportRecipe(f, *args, **kwargs)
        result.name = f.__name__
        return result

    return wrapper


# --------------------------------------------------------------------
class BuildEngine:
    _default: Optional["BuildEngine"] = None

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.injector = xeno.AsyncInjector()

    @classmethod
    def default(cls):
        if cls._default is None:
            cls._default = BuildEngine()
        return cls._default

    def provide(self, f, target=False):
        """ A decorator for specifying available resources.

        These resources are then automatically injected into other resource
        providers and targets using a Xeno injector."""

        @xeno.MethodAttributes.wraps(f)
        async def wrapper(*args, **kwargs):
            result = await xeno.async_wrap(f, *args, **kwargs)
            if isinstance(result, Recipe):
                result.name = f.__name__
                result.target = target
            return result

        self.injector.provide(wrapper, is_singleton=True)
        return wrapper

    def target(self, f):
        """ A wrapper for `provide`, indicating the resource as a build target. """
        return self.provide(f, True)

    def _recipes(self) -> List[Recipe]:
        names = sorted([k for k, v in self.injector.scan_resources(lambda k, v: True)])
        values = [self.injector.require(name) for name in names]
        return [value for value in values if isinstance(value, Recipe)]

    def print_targets(self):
        """ Logs the list of targets currently defined. """
        for recipe in self._recipes():
            if recipe.target:
                log.info(recipe.ansi_display_name)

    def print_tree(self, targets: Optional[List[str]] = None):
        """ Prints a tree illustrating the dependencies between targets. """
        if targets:
            recipes = self.compile_targets(targets)
        else:
            recipes = [r for r in self._recipes() if r.target]

        if len(recipes) > 1:
            root: Recipe = SequenceRecipe(recipes)
            root.name = "*"
        elif len(recipes) == 1:
            root = recipes[0]
        else:
            log.error("There are no recipes defined.")
            return

        log.info(
            format_tree(
                root,
                lambda r: r.ansi_display_name,
                lambda r: r.dependencies,
            )
        )

    def compile_targets(self, targets: List[str]) -> List[Recipe]:
        recipes = []
        for target in targets:
            try:
                try:
                    value = self.injector.require(target.replace("-", "_"))

                except xeno.MissingResourceError:
                    raise BuildError("'%s' is not defined." % target)

                if isinstance(value, Recipe) and value.target:
                    recipes.append(value)
                else:
                    raise BuildError("Target '%s' result is not a Recipe." % target)

            except Exception as e:
                raise InvalidTargetError(target) from e

        return recipes

    async def resolve(self, recipes: List[Recipe]):
        for recipe in recipes:
            await recipe.resolve()

    def run(self, recipes: List[Recipe]):
        """ Resolve the given recipes in order on the engine's event loop. """
        self.loop.run_until_complete(self.resolve(recipes))

    def reports(self, recipes: List[Recipe]) -> List[RunReport]:
        """ The run reports of every report recipe reachable from `recipes`. """
        result: List[RunReport] = []
        visited = set()

        def visit(recipe: Recipe):
            if id(recipe) in visited:
                return
            visited.add(id(recipe))
            for dep in recipe.dependencies:
                visit(dep)
            if isinstance(recipe, ReportRecipe):
                result.extend(recipe.reports)

        for recipe in recipes:
            visit(recipe)
        return result
