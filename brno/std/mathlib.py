import math
import random
from typing import Any, Callable, Dict, List

from brno.builtin_function import BuiltinFunction, namespace
from brno.types import power, to_number


def _unary(fn: Callable[[float], float]) -> Callable[[Any, List[Any]], float]:
    """Wrap a float function so domain errors produce NaN instead of raising."""
    def call(interp, args: List[Any]) -> float:
        x = to_number(args[0])
        try:
            return float(fn(x))
        except ValueError:
            return math.nan
    return call


def _rounding(fn: Callable[[float], int]) -> Callable[[Any, List[Any]], float]:
    def call(interp, args: List[Any]) -> float:
        x = to_number(args[0])
        if math.isnan(x) or math.isinf(x):
            return x
        return float(fn(x))
    return call


def _extreme(pick: Callable[..., float], empty: float) -> Callable[[Any, List[Any]], float]:
    def call(interp, args: List[Any]) -> float:
        numbers = [to_number(a) for a in args]
        if not numbers:
            return empty
        if any(math.isnan(n) for n in numbers):
            return math.nan
        return pick(numbers)
    return call


def random_between(interp, args: List[Any]) -> float:
    low, high = to_number(args[0]), to_number(args[1])
    return float(math.floor(random.random() * (high - low + 1)) + low)


def build_math() -> Dict[str, BuiltinFunction]:
    return namespace('matyš', {
        'abs': (1, _unary(abs)),
        'kolo': (1, _rounding(lambda x: math.floor(x + 0.5))),
        'pod': (1, _rounding(math.floor)),
        'nad': (1, _rounding(math.ceil)),
        'moc': (2, lambda interp, args: power(to_number(args[0]), to_number(args[1]))),
        'kořen': (1, _unary(math.sqrt)),
        'sin': (1, _unary(math.sin)),
        'cos': (1, _unary(math.cos)),
        'tan': (1, _unary(math.tan)),
        'min': (None, _extreme(min, math.inf)),
        'max': (None, _extreme(max, -math.inf)),
        'náhoda': (0, lambda interp, args: random.random()),
        'náhodaMezi': (2, random_between),
    })
