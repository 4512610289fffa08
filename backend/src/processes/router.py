"""Processes API Router - document creation, routing, history and dashboard.

Thin HTTP adapter over ProcessRoutingService. Engine errors are mapped to
HTTP status codes here; all business rules live in the service.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from auth.dependencies import get_current_user
from models.user import User
from domain.processes import (
    ProcessError,
    ProcessValidationError,
    PermissionDeniedError,
    InvalidReferenceError,
    ProcessNotFoundError,
    ConcurrencyError,
)
from .service import ProcessRoutingService
from .dashboard import DashboardService
from .schemas import (
    DocumentCreate,
    DocumentResponse,
    ForwardRequest,
    AssignRequest,
    StatusUpdateRequest,
    TrackingEntryResponse,
    DashboardSummaryResponse,
    AreaCount,
    CalendarEvent,
    CalendarResponse,
    AnalysisTimeItem,
)


router = APIRouter(prefix="/processes", tags=["processes"])

# Most specific class first
ERROR_STATUS_CODES = (
    (ProcessNotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConcurrencyError, status.HTTP_409_CONFLICT),
    (InvalidReferenceError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ProcessValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def to_http_exception(exc: ProcessError) -> HTTPException:
    """Map a routing engine error to an HTTPException carrying its message."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


def get_service(db: Session = Depends(get_db)) -> ProcessRoutingService:
    return ProcessRoutingService(db)


@router.get("", response_model=List[DocumentResponse], summary="List documents visible to the user")
def list_documents(
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    """Administrators see every document; other users see their area's documents."""
    return service.list_documents_for_user(current_user.id)


@router.get("/assigned", response_model=List[DocumentResponse], summary="Documents assigned to me")
def list_assigned_documents(
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    return service.list_assigned_documents(current_user.id)


@router.get("/near-deadline", response_model=List[DocumentResponse], summary="Documents due soon")
def list_documents_near_deadline(
    days: Optional[int] = Query(None, ge=0, description="Window in days (default NEAR_DEADLINE_DAYS)"),
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    try:
        return service.get_documents_near_deadline(days)
    except ProcessError as e:
        raise to_http_exception(e)


@router.get("/activity/recent", response_model=List[TrackingEntryResponse], summary="Latest movements")
def list_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    return service.get_recent_activity(limit)


@router.get("/dashboard/summary", response_model=DashboardSummaryResponse)
def get_dashboard_summary(
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    """Status and priority counters; per-area counts for administrators only."""
    summary = DashboardService(service.repository, service.clock).get_summary(current_user)
    return DashboardSummaryResponse(
        total_documents=summary.total_documents,
        pending_documents=summary.pending_documents,
        urgent_documents=summary.urgent_documents,
        in_analysis_documents=summary.in_analysis_documents,
        completed_documents=summary.completed_documents,
        documents_to_assign=summary.documents_to_assign,
        upcoming_deadlines=len(summary.upcoming_deadlines),
        upcoming_deadlines_list=[DocumentResponse.model_validate(d) for d in summary.upcoming_deadlines],
        recent_documents_count=summary.recent_documents_count,
        recent_documents_list=[DocumentResponse.model_validate(d) for d in summary.recent_documents],
        documents_by_area=[AreaCount(**row) for row in summary.documents_by_area],
    )


@router.get("/dashboard/calendar/{year}/{month}", response_model=CalendarResponse)
def get_deadline_calendar(
    year: int,
    month: int,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    try:
        days = DashboardService(service.repository, service.clock).get_calendar(year, month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return CalendarResponse(
        year=year,
        month=month,
        days={
            day: [CalendarEvent.model_validate(doc) for doc in documents]
            for day, documents in days.items()
        },
    )


@router.get("/dashboard/analysis-by-time", response_model=List[AnalysisTimeItem])
def get_analysis_by_time(
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    rows = DashboardService(service.repository, service.clock).get_analysis_by_time()
    return [
        AnalysisTimeItem(
            id=row["document"].id,
            process_number=row["document"].process_number,
            subject=row["document"].subject,
            priority=row["document"].priority,
            days_in_analysis=row["days_in_analysis"],
        )
        for row in rows
    ]


@router.get("/tracking/{tracking_number}", response_model=DocumentResponse)
def get_document_by_tracking_number(
    tracking_number: str,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    try:
        return service.get_document_by_tracking_number(tracking_number)
    except ProcessError as e:
        raise to_http_exception(e)


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def create_document(
    payload: DocumentCreate,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    """Create a document; its deadline is derived from priority or deadline_days."""
    try:
        return service.create_document(payload.model_dump(), created_by=current_user.id)
    except ProcessError as e:
        raise to_http_exception(e)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    try:
        return service.get_document(document_id)
    except ProcessError as e:
        raise to_http_exception(e)


@router.get("/{document_id}/history", response_model=List[TrackingEntryResponse])
def get_document_history(
    document_id: int,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    """Tracking ledger of a document, oldest entry first."""
    try:
        return service.get_document_history(document_id)
    except ProcessError as e:
        raise to_http_exception(e)


@router.post("/{document_id}/forward", response_model=TrackingEntryResponse)
def forward_document(
    document_id: int,
    payload: ForwardRequest,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    """Forward a document to another area, optionally to one of its employees.

    **Errors:**
    - 403: User is outside the document's area or it is assigned to someone else
    - 404: Document not found
    - 409: Document changed concurrently
    - 422: Destination area/employee inactive or inconsistent
    """
    try:
        return service.move_document(
            document_id,
            payload.to_area_id,
            user_id=current_user.id,
            to_employee_id=payload.to_employee_id,
            description=payload.description,
            deadline_days=payload.deadline_days,
            attachment_path=payload.attachment_path,
        )
    except ProcessError as e:
        raise to_http_exception(e)


@router.post("/{document_id}/assign", response_model=TrackingEntryResponse)
def assign_document(
    document_id: int,
    payload: AssignRequest,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    try:
        return service.assign_document(document_id, payload.employee_id, user_id=current_user.id)
    except ProcessError as e:
        raise to_http_exception(e)


@router.post("/{document_id}/status", response_model=TrackingEntryResponse)
def update_document_status(
    document_id: int,
    payload: StatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    try:
        return service.update_document_status(document_id, payload.status, user_id=current_user.id)
    except ProcessError as e:
        raise to_http_exception(e)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    service: ProcessRoutingService = Depends(get_service),
):
    """Delete a document that only has its creation record (administrators only)."""
    try:
        service.delete_document(document_id, user_id=current_user.id)
    except ProcessError as e:
        raise to_http_exception(e)
