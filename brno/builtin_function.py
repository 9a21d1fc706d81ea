import inspect
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from brno.errors import BrnoError
from brno.types import CallableValue, ErrorVal, from_host


@dataclass(eq=False)
class BuiltinFunction(CallableValue):
    """A host-implemented callable.

    `fn(interp, args)` returns a value or an awaitable; `arity` None means
    any number of arguments is accepted.
    """
    name: str
    arity: Optional[int]
    fn: Callable[..., Any]

    async def call(self, interp: Any, args: List[Any]) -> Any:
        try:
            result = self.fn(interp, args)
            if inspect.isawaitable(result):
                result = await result
        except BrnoError:
            raise
        except OSError as e:
            raise BrnoError(ErrorVal('IOError', f"{self.name}: {e}")) from e
        except re.error as e:
            raise BrnoError(ErrorVal('RegexError', f"{self.name}: {e}")) from e
        except (TypeError, ValueError, AttributeError, KeyError, IndexError, ZeroDivisionError, OverflowError) as e:
            raise BrnoError(ErrorVal('TypeError', f"{self.name}: {e}")) from e
        return from_host(result)

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


def namespace(prefix: str, entries: Dict[str, Tuple[Optional[int], Callable[..., Any]]]) -> Dict[str, BuiltinFunction]:
    """Build a namespace object mapping member names to builtins."""
    return {
        member: BuiltinFunction(f"{prefix}.{member}", arity, fn)
        for member, (arity, fn) in entries.items()
    }
