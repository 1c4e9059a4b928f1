"""Errors raised by the shutdown coordinator."""

from typing import Optional


class LifecycleError(Exception):
    """Base class for coordinator errors."""


class HandlerInstallError(LifecycleError):
    """Signal or exit handlers could not be installed. Fatal at startup."""


class SaveActionError(LifecycleError):
    """A save action raised, or its awaitable failed, during a drain."""

    def __init__(self, index: int, action: str, message: Optional[str] = None):
        self.index = index
        self.action = action
        super().__init__(message or f"save action #{index} ({action}) failed")


class ActionTimeoutError(SaveActionError):
    """A save action did not finish within its deadline."""

    def __init__(self, index: int, action: str, timeout: Optional[float]):
        self.timeout = timeout
        limit = f"{timeout:g}s" if timeout is not None else "its deadline"
        super().__init__(index, action, f"save action #{index} ({action}) exceeded {limit}")
