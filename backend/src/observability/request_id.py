"""Request ID propagation for log correlation.

The HTTP middleware stores the request id in a context variable so every log
line emitted while serving the request (including routing engine logs) can
carry it.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

NO_REQUEST_ID = "no-request-id"


def generate_request_id() -> str:
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Current request ID, or "no-request-id" outside of a request."""
    return request_id_var.get() or NO_REQUEST_ID


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)
