"""Save descriptors and coordinator states."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence


class ShutdownState(Enum):
    IDLE = "idle"
    DRAINING = "draining"
    DONE = "done"


@dataclass
class SaveDescriptor:
    """One unit of work to persist before exit.

    `action(data)` is called once during a drain and may return an awaitable.
    `pending_items` is only read, never invoked: if it is non-empty on normal
    exit its contents are written to the emergency flush file.
    """

    data: Any
    action: Callable[[Any], Any]
    pending_items: Optional[Sequence[Any]] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not callable(self.action):
            raise TypeError(f"save action must be callable, got {type(self.action).__name__}")
        if self.name is None:
            self.name = getattr(self.action, "__qualname__", None) or repr(self.action)

    def has_pending(self) -> bool:
        return bool(self.pending_items)
