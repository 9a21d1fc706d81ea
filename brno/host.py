"""Running several independent scripts on one event loop.

Each job gets its own interpreter. Jobs run one at a time in the order
given, except detached jobs, which start as background tasks and may
interleave with everything else; they are awaited before `run_scripts`
returns. A failing job is reported and does not stop the others.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional

from .capabilities import Capabilities, Loader
from .errors import BrnoError, LexerError, ParseError
from .interpreter import Interpreter
from .parser import parse_program


@dataclass
class ScriptJob:
    source: str
    name: str = '<script>'
    detached: bool = False


@dataclass
class ScriptResult:
    name: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def report_to_stderr(result: ScriptResult):
    error = result.error
    message = error.format() if isinstance(error, BrnoError) else str(error)
    print(f"Error running {result.name}: {message}", file=sys.stderr)


async def run_job(
    job: ScriptJob,
    loader: Optional[Loader],
    capabilities: Optional[Capabilities],
) -> ScriptResult:
    interpreter = Interpreter(loader=loader, capabilities=capabilities, compile=parse_program)
    try:
        await interpreter.run(parse_program(job.source))
    except (LexerError, ParseError, BrnoError) as e:
        return ScriptResult(job.name, e)
    finally:
        interpreter.close()
    return ScriptResult(job.name)


async def run_scripts(
    jobs: List[ScriptJob],
    loader: Optional[Loader] = None,
    capabilities: Optional[Capabilities] = None,
    report: Callable[[ScriptResult], None] = report_to_stderr,
) -> List[ScriptResult]:
    """Run `jobs` and return one result per job, in job order."""
    slots: List[Optional[ScriptResult]] = [None] * len(jobs)
    detached: List[asyncio.Task] = []
    indices: List[int] = []

    for index, job in enumerate(jobs):
        if job.detached:
            detached.append(asyncio.create_task(run_job(job, loader, capabilities)))
            indices.append(index)
            continue
        result = await run_job(job, loader, capabilities)
        if not result.ok:
            report(result)
        slots[index] = result

    for index, result in zip(indices, await asyncio.gather(*detached)):
        if not result.ok:
            report(result)
        slots[index] = result
    return [result for result in slots if result is not None]
