"""Process lifecycle: graceful shutdown that drains save actions before exit."""

from .coordinator import EXIT_FAILURE, EXIT_OK, HANDLED_SIGNALS, Lifecycle
from .descriptor import SaveDescriptor, ShutdownState
from .errors import ActionTimeoutError, HandlerInstallError, LifecycleError, SaveActionError

__all__ = [
    "EXIT_OK",
    "EXIT_FAILURE",
    "HANDLED_SIGNALS",
    "Lifecycle",
    "SaveDescriptor",
    "ShutdownState",
    "LifecycleError",
    "HandlerInstallError",
    "SaveActionError",
    "ActionTimeoutError",
]
