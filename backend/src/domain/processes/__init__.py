"""Processes domain module - routing rules, deadlines, numbering, permissions"""

from .errors import (
    ProcessError,
    ProcessValidationError,
    StatusTransitionError,
    PermissionDeniedError,
    InvalidReferenceError,
    ProcessNotFoundError,
    ConcurrencyError,
)
from .priority import Priority, DeadlineResult, calculate_deadline, parse_priority
from .process_status import (
    ProcessStatus,
    DEFAULT_STATUS,
    ALLOWED_TRANSITIONS,
    TransitionPolicy,
    PermissiveTransitionPolicy,
    StrictTransitionPolicy,
    get_transition_policy,
    parse_status,
)
from .permissions import (
    MovementDecision,
    DeletionDecision,
    decide_movement,
    decide_deletion,
    validate_document_movement,
    validate_document_deletion,
)
from .numbering import generate_process_number, generate_tracking_number
from .ports import ProcessRepositoryPort

__all__ = [
    "ProcessError",
    "ProcessValidationError",
    "StatusTransitionError",
    "PermissionDeniedError",
    "InvalidReferenceError",
    "ProcessNotFoundError",
    "ConcurrencyError",
    "Priority",
    "DeadlineResult",
    "calculate_deadline",
    "parse_priority",
    "ProcessStatus",
    "DEFAULT_STATUS",
    "ALLOWED_TRANSITIONS",
    "TransitionPolicy",
    "PermissiveTransitionPolicy",
    "StrictTransitionPolicy",
    "get_transition_policy",
    "parse_status",
    "MovementDecision",
    "DeletionDecision",
    "decide_movement",
    "decide_deletion",
    "validate_document_movement",
    "validate_document_deletion",
    "generate_process_number",
    "generate_tracking_number",
    "ProcessRepositoryPort",
]
