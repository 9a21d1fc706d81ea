import time
from typing import Any, Dict, List

from brno.builtin_function import BuiltinFunction, namespace
from brno.errors import BrnoError
from brno.types import format_value, object_from_pairs, type_name


def std_print(interp, args: List[Any]) -> Any:
    print(format_value(args[0]))
    return None


def std_now(interp, args: List[Any]) -> float:
    return time.time()


def std_throw(interp, args: List[Any]) -> Any:
    raise BrnoError(args[0])


def std_type(interp, args: List[Any]) -> str:
    return type_name(args[0])


def std_array(interp, args: List[Any]) -> List[Any]:
    return list(args)


def std_object(interp, args: List[Any]) -> Dict[str, Any]:
    return object_from_pairs(args)


def std_field_types(interp, args: List[Any]) -> Dict[str, str]:
    obj = args[0]
    if not isinstance(obj, dict):
        return {}
    return {key: type_name(value) for key, value in obj.items()}


def build_globals() -> Dict[str, Any]:
    printer = BuiltinFunction('vyblij', 1, std_print)
    return {
        'vyblij': printer,
        'řekni': printer,
        'pisni': printer,
        'fčil': BuiltinFunction('fčil', 0, std_now),
        'házej': BuiltinFunction('házej', 1, std_throw),
        'typ': BuiltinFunction('typ', 1, std_type),
        '__arr': BuiltinFunction('__arr', None, std_array),
        '__obj': BuiltinFunction('__obj', None, std_object),
        'šmirgl': namespace('šmirgl', {'typy': (1, std_field_types)}),
    }
