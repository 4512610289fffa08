"""Document status values and pluggable transition policies.

State flow (nominal):
    Pending / Em Análise -> In Progress -> Completed
    Archived reachable from any non-terminal state

The permissive policy (default) accepts any known status from any known
status. The strict policy enforces the nominal flow above. Both implement
TransitionPolicy so other policies can be plugged in without touching the
routing engine.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional


class ProcessStatus(str, Enum):
    """Document lifecycle status (values are stored verbatim)"""
    PENDING = "Pending"
    IN_ANALYSIS = "Em Análise"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


DEFAULT_STATUS = ProcessStatus.IN_ANALYSIS

TERMINAL_STATUSES = {ProcessStatus.COMPLETED, ProcessStatus.ARCHIVED}

# Nominal transitions used by the strict policy
ALLOWED_TRANSITIONS: Dict[ProcessStatus, List[ProcessStatus]] = {
    ProcessStatus.PENDING: [
        ProcessStatus.IN_ANALYSIS,
        ProcessStatus.IN_PROGRESS,
        ProcessStatus.ARCHIVED,
    ],
    ProcessStatus.IN_ANALYSIS: [
        ProcessStatus.PENDING,
        ProcessStatus.IN_PROGRESS,
        ProcessStatus.ARCHIVED,
    ],
    ProcessStatus.IN_PROGRESS: [
        ProcessStatus.COMPLETED,
        ProcessStatus.ARCHIVED,
    ],
    ProcessStatus.COMPLETED: [],  # Terminal state
    ProcessStatus.ARCHIVED: [],  # Terminal state
}


def parse_status(value: Optional[str]) -> Optional[ProcessStatus]:
    """Return the ProcessStatus for a raw value, or None if unknown."""
    try:
        return ProcessStatus(value)
    except ValueError:
        return None


class TransitionPolicy(ABC):
    """Decides whether a document may go from one status to another."""

    name: str = "abstract"

    @abstractmethod
    def can_transition(self, current: ProcessStatus, new: ProcessStatus) -> bool:
        """Return True if current -> new is allowed."""

    def allowed_from(self, current: ProcessStatus) -> List[ProcessStatus]:
        return [status for status in ProcessStatus if self.can_transition(current, status)]


class PermissiveTransitionPolicy(TransitionPolicy):
    """Any known status may be set from any known status."""

    name = "permissive"

    def can_transition(self, current: ProcessStatus, new: ProcessStatus) -> bool:
        return True


class StrictTransitionPolicy(TransitionPolicy):
    """Table-driven policy following ALLOWED_TRANSITIONS.

    Setting the status a document already has is accepted as a no-op
    transition so repeated requests stay idempotent.
    """

    name = "strict"

    def __init__(self, transitions: Optional[Dict[ProcessStatus, List[ProcessStatus]]] = None):
        self.transitions = transitions if transitions is not None else ALLOWED_TRANSITIONS

    def can_transition(self, current: ProcessStatus, new: ProcessStatus) -> bool:
        if current == new:
            return True
        return new in self.transitions.get(current, [])


_POLICIES = {
    PermissiveTransitionPolicy.name: PermissiveTransitionPolicy,
    StrictTransitionPolicy.name: StrictTransitionPolicy,
}


def get_transition_policy(name: str) -> TransitionPolicy:
    """Build a transition policy by its configured name.

    Raises:
        ValueError: If no policy is registered under name
    """
    try:
        return _POLICIES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown status transition policy '{name}'. "
            f"Available: {sorted(_POLICIES)}"
        )
