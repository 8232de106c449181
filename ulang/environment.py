from typing import Dict, Optional

from ulang.errors import UndefinedVariable


class Environment:
    """A variable store for one scope.

    The global environment has no parent and depth 0. Each function call
    gets a fresh environment whose parent is the global environment (never
    the caller's), with depth one greater than the caller's. Lookups fall
    back to the parent; assignments always land in this environment's own
    store, so code inside a function cannot overwrite a global.
    """
    def __init__(self, parent: Optional['Environment'] = None, depth: int = 0):
        self.parent = parent
        self.depth = depth
        self.values: Dict[str, float] = {}

    @property
    def in_function(self) -> bool:
        return self.depth > 0

    def get(self, name: str) -> float:
        if name in self.values:
            return self.values[name]
        if self.parent:
            return self.parent.get(name)
        raise UndefinedVariable(f"undefined variable '{name}'")

    def set(self, name: str, value: float):
        self.values[name] = value

    def child(self, bindings: Dict[str, float]) -> 'Environment':
        """Create the environment for a call made from this one."""
        root = self
        while root.parent is not None:
            root = root.parent
        env = Environment(parent=root, depth=self.depth + 1)
        env.values.update(bindings)
        return env
