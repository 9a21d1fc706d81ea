"""Host capabilities injected into the interpreter.

The core never reads files or fetches URLs on its own: `vokno` goes through
a `Loader`, compilation of imported source goes through a `Compiler`, and
the filesystem builtins check `Capabilities.fs_enabled` before doing any I/O.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, List

from brno.ast import Stmt

Loader = Callable[[str], Awaitable[str]]
Compiler = Callable[[str], List[Stmt]]


@dataclass(frozen=True)
class Capabilities:
    fs_enabled: bool = False
