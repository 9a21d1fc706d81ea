"""Builtin functions and namespaces installed into every interpreter.

The core only relies on their calling contract: each name is bound in the
global environment to a builtin (or an object of builtins) with a fixed or
variadic arity.
"""

from typing import Any

from .arrays import build_arrays, build_maps
from .core import build_globals
from .fs import build_fs
from .mathlib import build_math
from .system import build_crypto, build_process, build_time
from .text import build_regex, build_text


def install_builtins(interp: Any):
    env = interp.global_env
    for name, value in build_globals().items():
        env.define(name, value)
    env.define('text', build_text())
    env.define('šalát', build_arrays())
    env.define('mapa', build_maps())
    env.define('matyš', build_math())
    env.define('čas', build_time())
    env.define('regl', build_regex())
    env.define('krypto', build_crypto())
    env.define('šichta', build_process())
    env.define('šufle', build_fs(interp))
