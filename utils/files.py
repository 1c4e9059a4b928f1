"""Filesystem helpers: prefix lookup, glob cleanup, atomic JSON writes."""

import glob
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional

from .logging_config import get_logger

_log = get_logger(__name__)


def find_file_name_by_prefix(directory: str | Path, prefix: str) -> Optional[str]:
    """Return the first file name (sorted) in directory starting with prefix, or None. Unreadable directory -> None."""
    try:
        names = sorted(os.listdir(directory))
    except OSError as e:
        _log.error("directory_read_error", extra={"directory": str(directory), "error": str(e)})
        return None
    return next((name for name in names if name.startswith(prefix)), None)


def clean_dir(pattern: str) -> int:
    """Remove every file or directory matching a glob pattern. Returns number of paths removed."""
    removed = 0
    try:
        for pathname in glob.glob(str(pattern)):
            if os.path.isdir(pathname) and not os.path.islink(pathname):
                shutil.rmtree(pathname)
            else:
                os.remove(pathname)
            removed += 1
    except OSError as e:
        _log.error("clean_dir_error", extra={"pattern": str(pattern), "error": str(e)})
        return removed
    _log.info("clean_dir_complete", extra={"pattern": str(pattern), "removed": removed})
    return removed


def write_json(path: str | Path, obj: Any, indent: int = 2) -> Path:
    """Serialize obj and atomically replace path with it (temp file in the same directory, then rename)."""
    path = Path(path)
    text = json.dumps(obj, indent=indent, ensure_ascii=False)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    return path


def read_json(path: str | Path, default: Any = None) -> Any:
    """Load JSON from path; default when the file does not exist."""
    path = Path(path)
    if not path.exists():
        return default
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
