# --------------------------------------------------------------------
# bake.py: The `ivybake` command line entry point.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import json
import sys
from pathlib import Path
from typing import List, Optional

from ansilog import fg

from .build import BuildEngine
from .config import Config
from .errors import BuildError
from .reports import BuildReport
from .targets import DEFAULT_TARGET, define_targets

log = Config.get().get_logger("ivybake.bake")


# --------------------------------------------------------------------
def write_report(path: Path, report: BuildReport):
    with open(path, "w", encoding="utf-8") as outfile:
        json.dump(report.generate(), outfile, indent=2)
    log.debug("Report written to %s", path)


# --------------------------------------------------------------------
def build(config: Config, engine: Optional[BuildEngine] = None, default: str = DEFAULT_TARGET) -> bool:
    """Build the targets given on the command line, or `default` if there
    are none.  Returns True if the build succeeded."""

    try:
        if engine is None:
            engine = define_targets(BuildEngine.default(), config)

        if config.print_tree:
            engine.print_tree(config.targets)
            return True

        if config.list_targets:
            engine.print_targets()
            return True

        targets = config.targets or ([default] if default else [])
        if not targets:
            raise BuildError("No target or default specified.")

        recipes = engine.compile_targets(targets)
        try:
            engine.run(recipes)
        finally:
            if config.report_file:
                write_report(
                    config.resolve_path(config.report_file),
                    BuildReport.merge(" ".join(targets), engine.reports(recipes)),
                )
        log.info(fg.green("OK"))
        return True

    except Exception as e:
        log.error(e)
        if config.debug:
            log.exception("Exception details >>>")
        log.info(fg.red("FAIL"))
        return False


# --------------------------------------------------------------------
def main(argv: Optional[List[str]] = None):
    config = Config.get().load(sys.argv[1:] if argv is None else argv)

    if config.help:
        config.print_help()
        return

    if not build(config):
        sys.exit(1)


# --------------------------------------------------------------------
if __name__ == "__main__":
    main()
