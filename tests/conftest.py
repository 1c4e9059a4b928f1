import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class ExitRecorder:
    """Stands in for sys.exit: records codes instead of terminating pytest."""

    def __init__(self):
        self.codes = []
        self.events_at_exit = []
        self.events = None

    def __call__(self, code):
        self.codes.append(code)
        if self.events is not None:
            self.events_at_exit.append(list(self.events))


@pytest.fixture
def exit_recorder():
    return ExitRecorder()
