# --------------------------------------------------------------------
# shell.py: Subprocess execution with collected output.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import asyncio
import shlex
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence, Tuple

from .config import Config
from .util import decode

# -------------------------------------------------------------------
LineSinkFunction = Callable[[str], None]
OutputTaskData = Tuple[asyncio.StreamReader, LineSinkFunction]

# --------------------------------------------------------------------
log = Config.get().get_logger(__name__)


# --------------------------------------------------------------------
class OutputLine:
    def __init__(self, stderr: bool, line: str):
        self.stderr = stderr
        self.line = line

    def __str__(self):
        return self.line


# -------------------------------------------------------------------
class InMemoryOutputSink:
    def __init__(self):
        self._lines: List[OutputLine] = []

    def output(self, line):
        self._lines.append(OutputLine(False, line))

    def error(self, line):
        self._lines.append(OutputLine(True, line))

    def lines(self, stdout=True, stderr=False) -> Generator[OutputLine, None, None]:
        for line in self._lines:
            if (not line.stderr and stdout) or (line.stderr and stderr):
                yield line


# -------------------------------------------------------------------
class AsyncOutputCollector:
    # pylint/issues/1469: pylint doesn't recognize asyncio.subprocess
    # pylint: disable=E1101
    def __init__(self):
        self._readline_tasks: Dict[asyncio.Future[Any], OutputTaskData] = {}

    def _setup_readline_task(
        self, stream: Optional[asyncio.StreamReader], sink: LineSinkFunction
    ):
        if stream is not None:
            task = asyncio.ensure_future(stream.readline())
            self._readline_tasks[task] = (stream, sink)

    async def collect(self, proc: Any, sink: InMemoryOutputSink):
        if not isinstance(proc, asyncio.subprocess.Process):
            raise ValueError("`proc` is not an asyncio.subprocess.Process object.")
        self._setup_readline_task(proc.stdout, sink.output)
        self._setup_readline_task(proc.stderr, sink.error)

        while self._readline_tasks:
            done, _ = await asyncio.wait(
                self._readline_tasks, return_when=asyncio.FIRST_COMPLETED
            )

            for future in done:
                stream, sink_f = self._readline_tasks.pop(future)
                line = future.result()
                if line:
                    sink_f(decode(line).rstrip())
                    self._setup_readline_task(stream, sink_f)


# -------------------------------------------------------------------
class ShellResult:
    def __init__(self, argv: Sequence[str], returncode: int, sink: InMemoryOutputSink):
        self.argv = list(argv)
        self.returncode = returncode
        self.sink = sink

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def stdout(self) -> List[str]:
        return [l.line for l in self.sink.lines(stdout=True, stderr=False)]

    @property
    def stderr(self) -> List[str]:
        return [l.line for l in self.sink.lines(stdout=False, stderr=True)]

    def __repr__(self):
        return "<%s (%d) %s>" % (
            self.__class__.__name__,
            self.returncode,
            shlex.join(self.argv),
        )


# -------------------------------------------------------------------
async def run_command(argv: Sequence[str], cwd: Optional[Path] = None) -> ShellResult:
    """ Run the given command without a shell and collect its output. """
    log.debug("Running %s in %s", shlex.join(argv), cwd or Path.cwd())
    proc = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    collector = AsyncOutputCollector()
    sink = InMemoryOutputSink()
    await collector.collect(proc, sink)
    await proc.wait()
    return ShellResult(argv, proc.returncode, sink)
