"""Document priority and deadline calculation.

Priority decides the default deadline of a document:

    Urgente                -> 1 day
    Com Contagem de Prazo  -> 5 days
    Normal                 -> no deadline

An explicit positive day count always wins over the priority default.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, Optional


class Priority(str, Enum):
    """Document priority values (stored verbatim in the database)"""
    NORMAL = "Normal"
    DEADLINE_COUNTED = "Com Contagem de Prazo"
    URGENT = "Urgente"


DEFAULT_DEADLINE_DAYS: Dict[Priority, Optional[int]] = {
    Priority.URGENT: 1,
    Priority.DEADLINE_COUNTED: 5,
    Priority.NORMAL: None,
}


@dataclass(frozen=True)
class DeadlineResult:
    """Outcome of a deadline calculation.

    Attributes:
        deadline_days: Applied day count (None when the document has no deadline)
        deadline: Absolute due timestamp (None when deadline_days is None)
    """
    deadline_days: Optional[int]
    deadline: Optional[datetime]


def add_calendar_days(base: datetime, days: int) -> datetime:
    """Default date arithmetic: base plus N calendar days."""
    return base + timedelta(days=days)


def parse_priority(value: Optional[str]) -> Priority:
    """Convert a raw priority value, defaulting to Normal.

    Raises:
        ValueError: If value is not a known priority
    """
    if value is None or value == "":
        return Priority.NORMAL
    return Priority(value)


def calculate_deadline(
    priority: Priority,
    custom_days: Optional[int] = None,
    now: Optional[datetime] = None,
    add_days: Callable[[datetime, int], datetime] = add_calendar_days,
) -> DeadlineResult:
    """Compute the day count and due timestamp for a document.

    Args:
        priority: Document priority
        custom_days: Explicit day count; overrides the priority default when > 0
        now: Reference time (injected clock)
        add_days: Date arithmetic helper, normally the repository's
            calculate_deadline_date

    Returns:
        DeadlineResult

    Example:
        >>> calculate_deadline(Priority.NORMAL).deadline is None
        True
        >>> calculate_deadline(Priority.NORMAL, custom_days=10).deadline_days
        10
    """
    if custom_days is not None and custom_days > 0:
        deadline_days = custom_days
    else:
        deadline_days = DEFAULT_DEADLINE_DAYS.get(priority)

    if not deadline_days:
        return DeadlineResult(deadline_days=None, deadline=None)

    if now is None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)

    return DeadlineResult(deadline_days=deadline_days, deadline=add_days(now, deadline_days))
