"""JSON-array record store that buffers unsaved records in memory until save()."""

from pathlib import Path
from typing import Optional

from config import DEFAULT_RECORD_KEY

from .files import read_json, write_json
from .logging_config import get_logger
from .records import dedupe_by_key

_log = get_logger(__name__)


class JsonRecordStore:
    """
    Records are appended to `unsaved` and merged into the file on save().

    `unsaved` is mutated in place (never rebound), so it can be handed to the
    shutdown coordinator as pending_items and still reflect the current buffer.
    """

    def __init__(self, path: str | Path, key: str = DEFAULT_RECORD_KEY):
        self.path = Path(path)
        self.key = key
        self.unsaved: list[dict] = []

    def add(self, record: dict) -> None:
        self.unsaved.append(record)

    def load(self) -> list[dict]:
        return read_json(self.path, default=[])

    def save(self, records: Optional[list[dict]] = None) -> int:
        """Merge records (default: the unsaved buffer) into the file, first occurrence per key wins. Returns total stored."""
        records = self.unsaved if records is None else records
        merged = dedupe_by_key(self.load() + list(records), self.key)
        write_json(self.path, merged)
        saved = len(records)
        if records is self.unsaved:
            self.unsaved.clear()
        _log.info("records_saved", extra={"store": str(self.path), "saved": saved, "total": len(merged)})
        return len(merged)
