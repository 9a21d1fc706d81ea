"""The `čas` (time), `krypto` and `šichta` (process) namespaces.

`čas.usni`, `čas.odměř` and `krypto.sha256` are coroutines: the calling
program pauses at them and resumes in order once they complete.
"""

import asyncio
import base64
import hashlib
import math
import os
import time
import uuid
from typing import Any, Dict, List, Optional

from brno.builtin_function import BuiltinFunction, namespace
from brno.std.text import format_date
from brno.types import to_number, to_string


async def time_sleep(interp, args: List[Any]) -> None:
    ms = to_number(args[0])
    await asyncio.sleep(0 if math.isnan(ms) else max(ms, 0) / 1000)
    return None


async def time_measure(interp, args: List[Any]) -> float:
    start = time.perf_counter()
    await interp.invoke(args[0], [])
    return (time.perf_counter() - start) * 1000


def build_time() -> Dict[str, BuiltinFunction]:
    return namespace('čas', {
        'teď': (0, lambda interp, args: time.time() * 1000),
        'formát': (2, lambda interp, args: format_date(args[0], args[1])),
        'usni': (1, time_sleep),
        'odměř': (1, time_measure),
    })


def decode_base64(text: str) -> str:
    padded = text + '=' * (-len(text) % 4)
    return base64.b64decode(padded).decode('utf-8', errors='replace')


async def sha256_hex(interp, args: List[Any]) -> str:
    data = to_string(args[0]).encode('utf-8')
    return await asyncio.to_thread(lambda: hashlib.sha256(data).hexdigest())


def build_crypto() -> Dict[str, BuiltinFunction]:
    return namespace('krypto', {
        'uuid': (0, lambda interp, args: str(uuid.uuid4())),
        'base64': (1, lambda interp, args: base64.b64encode(to_string(args[0]).encode('utf-8')).decode('ascii')),
        'zbase64': (1, lambda interp, args: decode_base64(to_string(args[0]))),
        'sha256': (1, sha256_hex),
    })


def process_env(interp, args: List[Any]) -> Optional[str]:
    return os.environ.get(to_string(args[0]))


def process_exit(interp, args: List[Any]) -> None:
    code = to_number(args[0])
    raise SystemExit(0 if math.isnan(code) or math.isinf(code) else int(code))


def build_process() -> Dict[str, BuiltinFunction]:
    return namespace('šichta', {
        'argv': (0, lambda interp, args: list(interp.argv)),
        'env': (1, process_env),
        'konec': (1, process_exit),
    })
