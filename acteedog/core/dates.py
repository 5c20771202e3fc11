"""
Date handling for connector fetches.

A fetch targets one calendar day. ``DateRange`` turns the user's target date
into a UTC window and filters pages of newest-first vendor events against it.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import InvalidDateFormat, MissingOrUnparseableTimestamp


DATE_ONLY_FORMAT = "%Y-%m-%d"

TimestampGetter = Callable[[Dict[str, Any]], Optional[datetime]]


def parse_rfc3339(value: Any) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware UTC datetime.

    Args:
        value: Timestamp string such as "2025-11-18T00:37:03Z"

    Returns:
        The timestamp converted to UTC

    Raises:
        MissingOrUnparseableTimestamp: If the value is missing, not a string,
            or carries no UTC offset
    """
    if not isinstance(value, str) or not value:
        raise MissingOrUnparseableTimestamp(f"missing timestamp: {value!r}")

    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise MissingOrUnparseableTimestamp(f"invalid timestamp format: {value!r}") from e

    # RFC3339 requires an explicit offset, and a bare date is not a timestamp
    if "T" not in text.upper() or parsed.tzinfo is None:
        raise MissingOrUnparseableTimestamp(f"invalid timestamp format: {value!r}")

    return parsed.astimezone(timezone.utc)


def parse_target_date(target_date: str) -> date:
    """
    Extract the calendar day from a target date.

    RFC3339 is tried first; the day is taken as written, before any offset
    conversion. Plain YYYY-MM-DD is the fallback.

    Raises:
        InvalidDateFormat: If neither format parses
    """
    try:
        text = target_date.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        if "T" in text.upper() and parsed.tzinfo is not None:
            return parsed.date()
    except (AttributeError, ValueError):
        pass

    try:
        return datetime.strptime(target_date, DATE_ONLY_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise InvalidDateFormat(f"invalid target date: {target_date!r}") from e


@dataclass(frozen=True)
class DateRange:
    """
    A one-day UTC window, from 00:00:00.000000 to 23:59:59.999999.
    """

    start: datetime
    end: datetime

    @classmethod
    def from_target_date(cls, target_date: str) -> "DateRange":
        """
        Build the window for a target date.

        Args:
            target_date: RFC3339 timestamp or YYYY-MM-DD string

        Returns:
            The DateRange covering that day in UTC
        """
        day = parse_target_date(target_date)
        start = datetime.combine(day, time(0, 0, 0, 0), tzinfo=timezone.utc)
        end = datetime.combine(day, time(23, 59, 59, 999999), tzinfo=timezone.utc)
        return cls(start=start, end=end)

    @property
    def day(self) -> str:
        """The window's day as YYYY-MM-DD."""
        return self.start.strftime(DATE_ONLY_FORMAT)

    def contains(self, moment: datetime) -> bool:
        """Strict containment: the boundary instants themselves are outside."""
        return self.start < moment < self.end

    def filter_page(self, events: List[Dict[str, Any]],
                    timestamp_of: TimestampGetter) -> Tuple[List[Dict[str, Any]], bool]:
        """
        Filter one page of newest-first events against the window.

        Events whose timestamp cannot be read are skipped. Scanning stops at
        the first event older than the window start, since everything after
        it on this and later pages is older still.

        Args:
            events: Raw vendor events, newest first
            timestamp_of: Returns an event's timestamp, or None if unreadable

        Returns:
            Tuple of (kept_events, should_stop_paginating)
        """
        kept = []
        should_stop = False

        for event in events:
            moment = timestamp_of(event)
            if moment is None:
                continue

            if self.contains(moment):
                kept.append(event)

            if moment < self.start:
                should_stop = True
                break

        return kept, should_stop
