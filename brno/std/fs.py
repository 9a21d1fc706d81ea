import asyncio
import os
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from brno.builtin_function import BuiltinFunction, namespace
from brno.errors import BrnoError
from brno.types import ErrorVal, to_string


class FileSystem:
    """Filesystem operations backing the `šufle` namespace.

    Every operation first checks the interpreter's `fs_enabled` capability
    and fails with a CapabilityError when it is off, before any I/O.
    """
    def __init__(self, interp: Any):
        self.interp = interp

    def check_enabled(self):
        if not self.interp.capabilities.fs_enabled:
            raise BrnoError(ErrorVal('CapabilityError', 'filesystem access is disabled (run with --unsafe-fs)'))

    async def exists(self, path: str) -> bool:
        self.check_enabled()
        return await asyncio.to_thread(os.path.exists, path)

    async def read(self, path: str) -> str:
        self.check_enabled()
        try:
            return await asyncio.to_thread(Path(path).read_text, encoding='utf-8')
        except OSError as e:
            raise BrnoError(ErrorVal('IOError', f"cannot read {path}: {e.strerror or e}"))

    async def write(self, path: str, data: str) -> bool:
        self.check_enabled()
        try:
            await asyncio.to_thread(Path(path).write_text, data, encoding='utf-8')
            return True
        except OSError as e:
            raise BrnoError(ErrorVal('IOError', f"cannot write {path}: {e.strerror or e}"))

    async def list_dir(self, path: str) -> List[str]:
        self.check_enabled()
        try:
            return sorted(await asyncio.to_thread(os.listdir, path))
        except OSError as e:
            raise BrnoError(ErrorVal('IOError', f"cannot list {path}: {e.strerror or e}"))

    async def info(self, path: str) -> Dict[str, Any]:
        self.check_enabled()
        try:
            st = await asyncio.to_thread(os.stat, path)
        except OSError as e:
            raise BrnoError(ErrorVal('IOError', f"cannot stat {path}: {e.strerror or e}"))
        return stat_to_object(st)


def _iso(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp, timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def stat_to_object(st: os.stat_result) -> Dict[str, Any]:
    birthtime = getattr(st, 'st_birthtime', st.st_ctime)
    return {
        'isFile': stat.S_ISREG(st.st_mode),
        'isDirectory': stat.S_ISDIR(st.st_mode),
        'size': float(st.st_size),
        'dev': float(st.st_dev),
        'ino': float(st.st_ino),
        'mode': float(st.st_mode),
        'nlink': float(st.st_nlink),
        'uid': float(st.st_uid),
        'gid': float(st.st_gid),
        'rdev': float(getattr(st, 'st_rdev', 0)),
        'blksize': float(getattr(st, 'st_blksize', 0)),
        'blocks': float(getattr(st, 'st_blocks', 0)),
        'atimeMs': st.st_atime * 1000,
        'mtimeMs': st.st_mtime * 1000,
        'ctimeMs': st.st_ctime * 1000,
        'birthtimeMs': birthtime * 1000,
        'atime': _iso(st.st_atime),
        'mtime': _iso(st.st_mtime),
        'ctime': _iso(st.st_ctime),
        'birthtime': _iso(birthtime),
    }


def build_fs(interp: Any) -> Dict[str, BuiltinFunction]:
    fs = FileSystem(interp)
    return namespace('šufle', {
        'je': (1, lambda interp, args: fs.exists(to_string(args[0]))),
        'čti': (1, lambda interp, args: fs.read(to_string(args[0]))),
        'piš': (2, lambda interp, args: fs.write(to_string(args[0]), to_string(args[1]))),
        'seznam': (1, lambda interp, args: fs.list_dir(to_string(args[0]))),
        'info': (1, lambda interp, args: fs.info(to_string(args[0]))),
    })
