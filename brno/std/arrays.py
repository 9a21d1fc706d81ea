"""The `šalát` (array) and `mapa` (object) namespaces.

Arrays and objects are mutable and shared by reference: `hoď`, `sekni`,
`otoč`, `seřaď` and `mapa.dej` modify their argument in place. Callbacks
passed to `mapuj`, `filtruj`, `spočítej` and `seřaď` are called through
the interpreter without an arity check, so a one-parameter function can be
handed `(item, index, array)`.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from brno.builtin_function import BuiltinFunction, namespace
from brno.types import is_truthy, to_index, to_number, to_string


def _require_list(value: Any, name: str) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f"{name} expects an array")
    return value


def array_get(interp, args: List[Any]) -> Any:
    items, index = args
    if isinstance(items, (list, str)):
        i = to_index(index)
        return items[i] if i is not None and i < len(items) else None
    if isinstance(items, dict):
        return items.get(to_string(to_number(index)))
    return None


def array_push(interp, args: List[Any]) -> float:
    items = _require_list(args[0], 'šalát.hoď')
    items.append(args[1])
    return float(len(items))


def array_pop(interp, args: List[Any]) -> Any:
    items = _require_list(args[0], 'šalát.sekni')
    return items.pop() if items else None


def array_reverse(interp, args: List[Any]) -> List[Any]:
    items = _require_list(args[0], 'šalát.otoč')
    items.reverse()
    return items


async def merge_sort(items: List[Any], compare: Callable[[Any, Any], Awaitable[Any]]) -> List[Any]:
    """Stable merge sort driven by an asynchronous comparator."""
    if len(items) <= 1:
        return list(items)
    mid = len(items) // 2
    left = await merge_sort(items[:mid], compare)
    right = await merge_sort(items[mid:], compare)
    merged: List[Any] = []
    i = j = 0
    while i < len(left) and j < len(right):
        if to_number(await compare(left[i], right[j])) > 0:
            merged.append(right[j])
            j += 1
        else:
            merged.append(left[i])
            i += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


async def array_sort(interp, args: List[Any]) -> List[Any]:
    items = _require_list(args[0] if args else None, 'šalát.seřaď')
    comparator = args[1] if len(args) > 1 else None
    if comparator is None:
        items.sort(key=to_string)
    else:
        items[:] = await merge_sort(items, lambda a, b: interp.invoke(comparator, [a, b]))
    return items


async def array_map(interp, args: List[Any]) -> List[Any]:
    items, fn = _require_list(args[0], 'šalát.mapuj'), args[1]
    result = []
    for index, item in enumerate(list(items)):
        result.append(await interp.invoke(fn, [item, float(index), items]))
    return result


async def array_filter(interp, args: List[Any]) -> List[Any]:
    items, fn = _require_list(args[0], 'šalát.filtruj'), args[1]
    result = []
    for index, item in enumerate(list(items)):
        if is_truthy(await interp.invoke(fn, [item, float(index), items])):
            result.append(item)
    return result


async def array_reduce(interp, args: List[Any]) -> Any:
    items, fn, acc = _require_list(args[0], 'šalát.spočítej'), args[1], args[2]
    for index, item in enumerate(list(items)):
        acc = await interp.invoke(fn, [acc, item, float(index), items])
    return acc


def array_flat(interp, args: List[Any]) -> List[Any]:
    result: List[Any] = []
    for item in _require_list(args[0], 'šalát.placka'):
        if isinstance(item, list):
            result.extend(item)
        else:
            result.append(item)
    return result


def array_length(interp, args: List[Any]) -> Optional[float]:
    if isinstance(args[0], (list, str)):
        return float(len(args[0]))
    return None


def build_arrays() -> Dict[str, BuiltinFunction]:
    return namespace('šalát', {
        'je': (1, lambda interp, args: isinstance(args[0], list)),
        'vem': (2, array_get),
        'hoď': (2, array_push),
        'sekni': (1, array_pop),
        'otoč': (1, array_reverse),
        'seřaď': (None, array_sort),
        'mapuj': (2, array_map),
        'filtruj': (2, array_filter),
        'spočítej': (3, array_reduce),
        'placka': (1, array_flat),
        'dl': (1, array_length),
    })


def _entries(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def map_get(interp, args: List[Any]) -> Any:
    obj, key = args
    if isinstance(obj, dict):
        return obj.get(to_string(key))
    return None


def map_put(interp, args: List[Any]) -> Any:
    obj, key, value = args
    if not isinstance(obj, dict):
        raise TypeError("mapa.dej expects an object")
    obj[to_string(key)] = value
    return value


def build_maps() -> Dict[str, BuiltinFunction]:
    return namespace('mapa', {
        'vytvor': (0, lambda interp, args: {}),
        'vem': (2, map_get),
        'dej': (3, map_put),
        'keys': (1, lambda interp, args: list(_entries(args[0]).keys())),
        'values': (1, lambda interp, args: list(_entries(args[0]).values())),
        'páry': (1, lambda interp, args: [[k, v] for k, v in _entries(args[0]).items()]),
        'spojit': (2, lambda interp, args: {**_entries(args[0]), **_entries(args[1])}),
    })
