"""User roles for DocFlow.

Role Model:
- Administrator: sees and moves every document, the only role allowed to delete
- Secretary: scoped to the user's area (and employee assignment, if any)

Permission Matrix:
┌──────────────────────────────┬───────────────┬───────────┐
│ Action                       │ Administrator │ Secretary │
├──────────────────────────────┼───────────────┼───────────┤
│ List all documents           │       ✓       │           │
│ List documents of own area   │       ✓       │     ✓     │
│ Move / assign / set status   │       ✓       │  own area │
│ Delete (creation-only docs)  │       ✓       │           │
│ Per-area dashboard counts    │       ✓       │           │
└──────────────────────────────┴───────────────┴───────────┘
"""

from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """User roles in DocFlow.

    Values are stored as TEXT in the database and must match exactly.
    """
    ADMINISTRATOR = "Administrator"
    SECRETARY = "Secretary"


def is_administrator(user: Any) -> bool:
    """Check whether a user record carries the Administrator role."""
    return user is not None and user.role == UserRole.ADMINISTRATOR.value
