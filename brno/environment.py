from typing import Any, Dict, Optional

from brno.errors import BrnoError
from brno.types import ErrorVal


class Environment:
    """Represents a scope mapping identifiers to values.

    Scopes form a chain through `parent`; lookups and assignments walk
    outward to the first scope that binds the name.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        # always binds in this scope, shadowing any outer binding
        self.values[name] = value

    def resolve(self, name: str) -> Optional['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def get(self, name: str) -> Any:
        env = self.resolve(name)
        if env is None:
            raise BrnoError(ErrorVal('NameError', f"unknown variable '{name}'"))
        return env.values[name]

    def set(self, name: str, value: Any):
        env = self.resolve(name)
        if env is None:
            raise BrnoError(ErrorVal('NameError', f"unknown variable '{name}'"))
        env.values[name] = value
