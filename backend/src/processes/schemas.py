"""Pydantic schemas for the Processes API

Request/response models for document routing endpoints.
"""

from datetime import datetime
from typing import Optional, List, Dict

from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# Document Schemas
# ============================================================================

class DocumentCreate(BaseModel):
    """Schema for creating a document (POST /processes)"""
    subject: str = Field(..., description="Subject of the document")
    document_type_id: int = Field(..., gt=0)
    origin_area_id: int = Field(..., gt=0)
    current_area_id: Optional[int] = Field(None, gt=0, description="Defaults to origin_area_id")
    current_employee_id: Optional[int] = Field(None, gt=0)
    priority: str = Field("Normal", description="Normal, Com Contagem de Prazo or Urgente")
    status: Optional[str] = Field(None, description="Defaults to 'Em Análise'")
    deadline_days: Optional[int] = Field(None, ge=0, description="Overrides the priority default")
    folios: int = Field(1, ge=1)
    file_path: Optional[str] = None
    sender_name: Optional[str] = None
    sender_document_id: Optional[str] = None
    sender_email: Optional[str] = None
    sender_phone: Optional[str] = None
    representation: Optional[str] = None
    company_name: Optional[str] = None
    company_tax_id: Optional[str] = None

    model_config = ConfigDict(extra='forbid')


class DocumentResponse(BaseModel):
    """Response schema for a document"""
    id: int
    process_number: str
    tracking_number: str
    document_type_id: int
    priority: str
    origin_area_id: int
    current_area_id: int
    current_employee_id: Optional[int] = None
    status: str
    subject: str
    folios: int
    file_path: Optional[str] = None
    sender_name: Optional[str] = None
    sender_document_id: Optional[str] = None
    sender_email: Optional[str] = None
    sender_phone: Optional[str] = None
    representation: Optional[str] = None
    company_name: Optional[str] = None
    company_tax_id: Optional[str] = None
    deadline_days: Optional[int] = None
    deadline: Optional[datetime] = None
    created_by: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Routing Schemas
# ============================================================================

class ForwardRequest(BaseModel):
    """Schema for forwarding a document (POST /processes/{id}/forward)"""
    to_area_id: int = Field(..., gt=0)
    to_employee_id: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, description="Defaults to 'Encaminhado para <area>'")
    deadline_days: Optional[int] = Field(None, ge=0, description="New deadline; omitted clears it")
    attachment_path: Optional[str] = None

    model_config = ConfigDict(extra='forbid')


class AssignRequest(BaseModel):
    """Schema for assigning a document to an employee of its current area"""
    employee_id: int = Field(..., gt=0)

    model_config = ConfigDict(extra='forbid')


class StatusUpdateRequest(BaseModel):
    """Schema for changing the status of a document"""
    status: str

    model_config = ConfigDict(extra='forbid')


class TrackingEntryResponse(BaseModel):
    """Response schema for one tracking ledger entry"""
    id: int
    document_id: int
    from_area_id: int
    to_area_id: int
    from_employee_id: Optional[int] = None
    to_employee_id: Optional[int] = None
    description: Optional[str] = None
    attachment_path: Optional[str] = None
    deadline_days: Optional[int] = None
    created_by: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Dashboard Schemas
# ============================================================================

class AreaCount(BaseModel):
    area_id: int
    area_name: str
    count: int


class DashboardSummaryResponse(BaseModel):
    """Counters shown on the dashboard"""
    total_documents: int
    pending_documents: int
    urgent_documents: int
    in_analysis_documents: int
    completed_documents: int
    documents_to_assign: int
    upcoming_deadlines: int
    upcoming_deadlines_list: List[DocumentResponse]
    recent_documents_count: int
    recent_documents_list: List[DocumentResponse]
    documents_by_area: List[AreaCount] = Field(default_factory=list)


class CalendarEvent(BaseModel):
    id: int
    process_number: str
    subject: str
    priority: str
    deadline: datetime

    model_config = ConfigDict(from_attributes=True)


class CalendarResponse(BaseModel):
    """Documents due in a month, keyed by day of month"""
    year: int
    month: int
    days: Dict[int, List[CalendarEvent]]


class AnalysisTimeItem(BaseModel):
    id: int
    process_number: str
    subject: str
    priority: str
    days_in_analysis: int
