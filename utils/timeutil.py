"""Timestamps and date labels used in file names and records."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from config import MONTH_MAP


def get_timestamp(now: Optional[datetime] = None) -> str:
    """Local time as 'YYYY-MM-DD HH:MM:SS.mmm'."""
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def timestamp(now: Optional[datetime] = None) -> str:
    """UTC time as ISO-8601 with a space separator, millisecond precision and no zone suffix."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def get_curr_mth_yr(now: Optional[datetime] = None) -> str:
    """Month label for output folders, e.g. 'March_2025'."""
    now = now or datetime.now()
    return f"{MONTH_MAP[now.month - 1]}_{now.year}"


async def sleep(ms: float) -> None:
    await asyncio.sleep(ms / 1000)
