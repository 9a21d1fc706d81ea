"""Runtime value model and coercions for BrnoScript.

BrnoScript values map onto a closed set of Python types:

    null      -> None
    boolean   -> bool
    number    -> float (always a float, never an int)
    string    -> str
    array     -> list
    object    -> dict with str keys
    callable  -> CallableValue (user functions and builtins)
    error     -> ErrorVal (what a caught runtime error looks like)

Every helper in this module dispatches over exactly that set and raises a
Python TypeError for anything else, so a host object that leaks into the
interpreter is reported instead of being coerced silently.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class CallableValue:
    """Base class for everything a call expression can invoke.

    `arity` is the fixed parameter count or None for variadic callables.
    Subclasses implement `call(interp, args)` as a coroutine.
    """
    name: str
    arity: Optional[int]

    async def call(self, interp: Any, args: List[Any]) -> Any:
        raise NotImplementedError


@dataclass
class ErrorVal:
    """Represents a BrnoScript runtime error value.

    Errors raised by the interpreter itself are thrown as ErrorVal
    instances. Scripts can read their `name` and `message` members after
    catching them.
    """
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


_DECIMAL = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')
_RADIX = re.compile(r'0([xXoObB])([0-9a-fA-F]+)')
_RADIX_BASES = {'x': 16, 'o': 8, 'b': 2}


def check_value(value: Any) -> Any:
    """Return `value` unchanged if it belongs to the value model."""
    if value is None or isinstance(value, (bool, float, str, list, dict, ErrorVal, CallableValue)):
        return value
    raise TypeError(f"not a BrnoScript value: {type(value).__name__}")


def from_host(value: Any) -> Any:
    """Convert a plain Python value returned by host code into the value model.

    Lists and dicts are returned as-is so builtins that mutate their
    argument hand back the same object.
    """
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return float(value)
    if isinstance(value, tuple):
        return [from_host(v) for v in value]
    return check_value(value)


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return not (value == 0.0 or math.isnan(value))
    if isinstance(value, str):
        return len(value) > 0
    check_value(value)
    # arrays, objects, callables and errors are always truthy
    return True


def strict_equals(a: Any, b: Any) -> bool:
    """Equality without coercion; composite values compare by identity."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, float) and isinstance(b, float):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is b


def _parse_number(text: str) -> float:
    text = text.strip()
    if text == '':
        return 0.0
    if _DECIMAL.fullmatch(text):
        return float(text)
    if text in ('Infinity', '+Infinity'):
        return math.inf
    if text == '-Infinity':
        return -math.inf
    radix = _RADIX.fullmatch(text)
    if radix:
        try:
            return float(int(radix.group(2), _RADIX_BASES[radix.group(1).lower()]))
        except ValueError:
            return math.nan
    return math.nan


def to_number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        return _parse_number(value)
    if isinstance(value, list):
        return _parse_number(to_string(value))
    check_value(value)
    return math.nan


def to_index(value: Any) -> Optional[int]:
    """Return `value` as a list index if it is a whole, non-negative number."""
    number = to_number(value)
    if math.isnan(number) or math.isinf(number) or number < 0 or number != int(number):
        return None
    return int(number)


def format_number(x: float) -> str:
    """Format a number the way scripts expect to see it.

    Whole numbers print without a fractional part, very large and very
    small magnitudes use exponent notation with an explicit sign.
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'Infinity' if x > 0 else '-Infinity'
    if x == int(x) and abs(x) < 2 ** 53:
        return str(int(x))
    text = repr(x)
    if x == int(x) and abs(x) < 1e21:
        # shortest digits from repr, padded out to a plain integer
        if 'e' not in text:
            return text[:-2] if text.endswith('.0') else text
        mantissa, exponent = text.split('e')
        sign = '-' if mantissa.startswith('-') else ''
        digits = mantissa.lstrip('-').replace('.', '')
        return sign + digits + '0' * (int(exponent) - len(digits) + 1)
    if 'e' not in text:
        return text
    mantissa, exponent = text.split('e')
    exp = int(exponent)
    if -7 < exp < 0:
        sign = '-' if mantissa.startswith('-') else ''
        digits = mantissa.lstrip('-').replace('.', '')
        return f"{sign}0.{'0' * (-exp - 1)}{digits}"
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


def to_string(value: Any) -> str:
    """Convert a value to a string for concatenation and text builtins."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ','.join('' if item is None else to_string(item) for item in value)
    if isinstance(value, dict):
        return '[object Object]'
    if isinstance(value, ErrorVal):
        return f"{value.name}: {value.message}"
    if isinstance(value, CallableValue):
        return repr(value)
    raise TypeError(f"not a BrnoScript value: {type(value).__name__}")


def format_value(value: Any, nested: bool = False) -> str:
    """Convert a value to the form `vyblij` prints.

    Strings print raw at the top level and quoted inside containers.
    """
    if isinstance(value, str):
        return f'"{value}"' if nested else value
    if isinstance(value, list):
        return '[' + ', '.join(format_value(item, True) for item in value) + ']'
    if isinstance(value, dict):
        entries = ', '.join(f"{k}: {format_value(v, True)}" for k, v in value.items())
        return '{' + entries + '}'
    return to_string(value)


def type_name(value: Any) -> str:
    """Return the script-visible type name reported by `typ`."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'pravda' if value else 'nepravda'
    if isinstance(value, float):
        return 'číslo'
    if isinstance(value, str):
        return 'řetězec'
    if isinstance(value, list):
        return 'pole'
    if isinstance(value, CallableValue):
        return 'funkce'
    if isinstance(value, (dict, ErrorVal)):
        return 'mapa'
    raise TypeError(f"not a BrnoScript value: {type(value).__name__}")


def object_from_pairs(args: List[Any]) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for i in range(0, len(args), 2):
        obj[to_string(args[i])] = args[i + 1] if i + 1 < len(args) else None
    return obj


# Arithmetic with IEEE semantics; Python raises where scripts expect NaN/Infinity.

def divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def modulo(a: float, b: float) -> float:
    if b == 0.0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def power(a: float, b: float) -> float:
    if math.isnan(b) or (abs(a) == 1.0 and math.isinf(b)):
        return math.nan
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.inf if a > 0 or b == int(b) and int(b) % 2 == 0 else -math.inf
    except ValueError:
        # negative base with fractional exponent, or 0 to a negative power
        if a == 0.0:
            return math.copysign(math.inf, a) if b == int(b) and int(b) % 2 == 1 else math.inf
        return math.nan
