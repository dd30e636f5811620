from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = ["ticket_number", "weight_tons"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketStatus(str, Enum):
    PROCESSING_OCR = "processing_ocr"
    DRAFT = "draft"
    PENDING = "pending"
    OCR_ERROR = "ocr_error"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExtractedFields(BaseModel):
    """Structured fields recognized on a disposal ticket. None means absent."""
    ticket_number: str | None = None
    weight_tons: str | None = None
    truck_number: str | None = None
    driver_actual: str | None = None
    driver_badge: str | None = None
    debris_type: str | None = None

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def needs_fix(self) -> bool:
        return self.ticket_number is None or self.weight_tons is None

    @property
    def weight_decimal(self) -> Decimal | None:
        if self.weight_tons is None:
            return None
        try:
            return Decimal(self.weight_tons)
        except InvalidOperation:
            return None


class Ticket(BaseModel):
    """A persisted ticket document."""
    id: str | None = None
    storage_path: str | None = None
    uploader_uid: str | None = None
    uploader_email: str | None = None
    file_name: str | None = None
    content_type: str | None = None
    created_at: datetime
    status: TicketStatus = TicketStatus.PROCESSING_OCR
    fix_needed: bool = False
    manual: bool = False
    fields: ExtractedFields = Field(default_factory=ExtractedFields)
    ocr_error: str | None = None
    ocr_processed_at: datetime | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None


class TicketFix(BaseModel):
    """Field corrections submitted by a reviewer. Only set fields are applied."""
    model_config = ConfigDict(extra="forbid")

    ticket_number: str | None = None
    weight_tons: str | None = None
    truck_number: str | None = None
    driver_actual: str | None = None
    driver_badge: str | None = None
    debris_type: str | None = None


class ManualTicket(BaseModel):
    """A ticket typed in by hand instead of photographed."""
    model_config = ConfigDict(extra="forbid")

    ticket_number: str | None = None
    truck_number: str | None = None
    weight_tons: str | None = None
    driver_actual: str | None = None
    driver_badge: str | None = None
    debris_type: str | None = None


class TicketStats(BaseModel):
    pending: int = 0
    fix_needed: int = 0
    approved_today: int = 0
    approved_total: int = 0
