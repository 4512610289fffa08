"""Permission rules for moving and deleting documents.

Both validators are read-only: they never mutate state and can be called
any number of times with the same result.

Movement (first matching rule wins):
1. User or document missing   -> denied
2. Administrator              -> allowed
3. User outside document area -> denied
4. Document assigned to another employee -> denied
5. Otherwise                  -> allowed

Deletion (first matching rule wins):
1. User or document missing   -> denied
2. Not an Administrator       -> denied
3. More than one ledger entry -> denied
4. Otherwise                  -> allowed
"""

from dataclasses import dataclass
from typing import Any, Optional

from auth.roles import is_administrator
from .ports import ProcessRepositoryPort


REASON_NOT_FOUND = "User or document not found"
REASON_NOT_IN_AREA = "Document is not in your area"
REASON_ASSIGNED_TO_OTHER = "Document is assigned to another employee"
REASON_ADMIN_ONLY = "Only administrators can delete documents"
REASON_HAS_HISTORY = "Document with movement history cannot be deleted"


@dataclass(frozen=True)
class MovementDecision:
    can_move: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class DeletionDecision:
    can_delete: bool
    reason: Optional[str] = None


def decide_movement(user: Optional[Any], document: Optional[Any]) -> MovementDecision:
    """Apply the movement rules to already-loaded records."""
    if user is None or document is None:
        return MovementDecision(False, REASON_NOT_FOUND)

    if is_administrator(user):
        return MovementDecision(True)

    if user.area_id != document.current_area_id:
        return MovementDecision(False, REASON_NOT_IN_AREA)

    if document.current_employee_id and user.employee_id != document.current_employee_id:
        return MovementDecision(False, REASON_ASSIGNED_TO_OTHER)

    return MovementDecision(True)


def decide_deletion(
    user: Optional[Any],
    document: Optional[Any],
    tracking_count: int,
) -> DeletionDecision:
    """Apply the deletion rules to already-loaded records.

    Args:
        user: Acting user (None if not found)
        document: Target document (None if not found)
        tracking_count: Number of ledger entries of the document
    """
    if user is None or document is None:
        return DeletionDecision(False, REASON_NOT_FOUND)

    if not is_administrator(user):
        return DeletionDecision(False, REASON_ADMIN_ONLY)

    if tracking_count > 1:
        return DeletionDecision(False, REASON_HAS_HISTORY)

    return DeletionDecision(True)


def validate_document_movement(
    repository: ProcessRepositoryPort,
    user_id: int,
    document_id: int,
) -> MovementDecision:
    """Decide whether user_id may move document_id."""
    return decide_movement(
        repository.get_user(user_id),
        repository.get_document(document_id),
    )


def validate_document_deletion(
    repository: ProcessRepositoryPort,
    document_id: int,
    user_id: int,
) -> DeletionDecision:
    """Decide whether user_id may delete document_id."""
    user = repository.get_user(user_id)
    document = repository.get_document(document_id)

    tracking_count = 0
    if user is not None and document is not None and is_administrator(user):
        tracking_count = len(repository.list_document_tracking_by_document_id(document_id))

    return decide_deletion(user, document, tracking_count)
