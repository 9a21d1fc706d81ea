"""The `text` and `regl` namespaces: string and regular expression helpers.

Arguments are stringified first, so `text.velký(12)` is `"12"`. Patterns
use Python's `re` syntax; replacement strings understand `$&`, `$1`..`$99`
and `$$`.
"""

import math
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from brno.builtin_function import BuiltinFunction, namespace
from brno.types import to_number, to_string


def _clamp(value: float, length: int) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return length if value > 0 else 0
    return max(0, min(length, int(value)))


def substring(s: str, start: float, end: float) -> str:
    a, b = _clamp(start, len(s)), _clamp(end, len(s))
    if a > b:
        a, b = b, a
    return s[a:b]


def format_date(ms: Any, mask: Any) -> str:
    """Fill a `YYYY-MM-DD hh:mm:ss` style mask from epoch milliseconds (local time)."""
    moment = datetime.fromtimestamp(to_number(ms) / 1000)
    text = to_string(mask)
    for token, value in (
        ('YYYY', str(moment.year)),
        ('MM', f"{moment.month:02d}"),
        ('DD', f"{moment.day:02d}"),
        ('hh', f"{moment.hour:02d}"),
        ('mm', f"{moment.minute:02d}"),
        ('ss', f"{moment.second:02d}"),
    ):
        text = text.replace(token, value)
    return text


def text_slice(interp, args: List[Any]) -> str:
    s = to_string(args[0])
    start = to_number(args[1])
    return substring(s, start, start + to_number(args[2]))


def text_replace(interp, args: List[Any]) -> str:
    # replaces every occurrence; an empty needle goes between characters
    return to_string(args[2]).join(text_split(interp, [args[0], args[1]]))


def text_split(interp, args: List[Any]) -> List[str]:
    s, sep = to_string(args[0]), to_string(args[1])
    if sep == '':
        return list(s)
    return s.split(sep)


def text_join(interp, args: List[Any]) -> str:
    items = args[0]
    if isinstance(items, str):
        items = list(items)
    elif not isinstance(items, list):
        items = []
    return to_string(args[1]).join('' if item is None else to_string(item) for item in items)


def build_text() -> Dict[str, BuiltinFunction]:
    return namespace('text', {
        'díl': (3, text_slice),
        'nahrad': (3, text_replace),
        'malý': (1, lambda interp, args: to_string(args[0]).lower()),
        'velký': (1, lambda interp, args: to_string(args[0]).upper()),
        'řež': (2, text_split),
        'spojuj': (2, text_join),
        'trim': (1, lambda interp, args: to_string(args[0]).strip()),
        'obsahuje': (2, lambda interp, args: to_string(args[1]) in to_string(args[0])),
        'zacina': (2, lambda interp, args: to_string(args[0]).startswith(to_string(args[1]))),
        'končí': (2, lambda interp, args: to_string(args[0]).endswith(to_string(args[1]))),
        'formátujDatum': (2, lambda interp, args: format_date(args[0], args[1])),
    })


_GROUP_REF = re.compile(r'\$(\$|&|\d{1,2})')


def expand_replacement(match: 're.Match[str]', template: str) -> str:
    def substitute(ref: 're.Match[str]') -> str:
        token = ref.group(1)
        if token == '$':
            return '$'
        if token == '&':
            return match.group(0)
        index = int(token)
        if 0 < index <= match.re.groups:
            return match.group(index) or ''
        # `$10` with fewer groups reads as `$1` then `0`
        if len(token) == 2 and 0 < int(token[0]) <= match.re.groups:
            return (match.group(int(token[0])) or '') + token[1]
        return ref.group(0)
    return _GROUP_REF.sub(substitute, template)


def regex_find(interp, args: List[Any]) -> Optional[str]:
    match = re.search(to_string(args[1]), to_string(args[0]))
    return match.group(0) if match else None


def regex_find_all(interp, args: List[Any]) -> List[str]:
    return [m.group(0) for m in re.finditer(to_string(args[1]), to_string(args[0]))]


def regex_replace(interp, args: List[Any]) -> str:
    template = to_string(args[2])
    return re.sub(to_string(args[1]), lambda m: expand_replacement(m, template), to_string(args[0]))


def build_regex() -> Dict[str, BuiltinFunction]:
    return namespace('regl', {
        'najdi': (2, regex_find),
        'všeci': (2, regex_find_all),
        'nahrad': (3, regex_replace),
    })
