"""Process and tracking number generation.

Formats:
    Process number:  PROC-YYYY-MM-DD-NNNN  (sequence per day, 4 digits)
    Tracking number: TRK-YYYY-NNN          (sequence per year, 3 digits)

The sequence is the count of existing numbers sharing the prefix, plus one.
This is a weak uniqueness policy: two concurrent creations can compute the
same candidate. The tracking number column is unique, so such a collision
fails the second transaction instead of producing a duplicate.
"""

from datetime import datetime
from typing import Callable

from .ports import ProcessRepositoryPort


PROCESS_PREFIX = "PROC"
TRACKING_PREFIX = "TRK"
PROCESS_SEQUENCE_WIDTH = 4
TRACKING_SEQUENCE_WIDTH = 3


def process_number_prefix(now: datetime) -> str:
    return f"{PROCESS_PREFIX}-{now:%Y-%m-%d}"


def tracking_number_prefix(now: datetime) -> str:
    return f"{TRACKING_PREFIX}-{now:%Y}"


def format_process_number(now: datetime, sequence: int) -> str:
    """
    >>> format_process_number(datetime(2024, 3, 5), 7)
    'PROC-2024-03-05-0007'
    """
    return f"{process_number_prefix(now)}-{sequence:0{PROCESS_SEQUENCE_WIDTH}d}"


def format_tracking_number(now: datetime, sequence: int) -> str:
    """
    >>> format_tracking_number(datetime(2024, 3, 5), 12)
    'TRK-2024-012'
    """
    return f"{tracking_number_prefix(now)}-{sequence:0{TRACKING_SEQUENCE_WIDTH}d}"


def _next_free(
    count: int,
    build: Callable[[int], str],
    exists: Callable[[str], bool],
) -> str:
    # Count-derived sequence; skip forward past numbers freed up by deletions
    sequence = count + 1
    candidate = build(sequence)
    while exists(candidate):
        sequence += 1
        candidate = build(sequence)
    return candidate


def generate_process_number(repository: ProcessRepositoryPort, now: datetime) -> str:
    """Build the next PROC-YYYY-MM-DD-NNNN number for now's date."""
    prefix = process_number_prefix(now)
    return _next_free(
        repository.count_documents_with_process_prefix(f"{prefix}-"),
        lambda sequence: format_process_number(now, sequence),
        repository.process_number_exists,
    )


def generate_tracking_number(repository: ProcessRepositoryPort, now: datetime) -> str:
    """Build the next TRK-YYYY-NNN number for now's year."""
    prefix = tracking_number_prefix(now)
    return _next_free(
        repository.count_documents_with_tracking_prefix(f"{prefix}-"),
        lambda sequence: format_tracking_number(now, sequence),
        repository.tracking_number_exists,
    )
