"""Manager-facing review operations over persisted tickets.

Every mutating operation takes the caller's uid explicitly; authentication
itself happens upstream. Errors are raised as TicketError subclasses and
translated to HTTP responses by the API layer.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Callable

from pydantic import BaseModel

from src.core.errors import (
    InvalidArgumentError,
    TicketNotFoundError,
    TicketStateError,
    UnauthenticatedError,
)
from src.core.extractor import normalize_weight
from src.core.ticket import (
    ExtractedFields,
    ManualTicket,
    Ticket,
    TicketFix,
    TicketStats,
    TicketStatus,
    utcnow,
)
from src.services.blob.base import BlobStore
from src.services.export.base import TicketExporter
from src.services.tickets.base import TicketStore

logger = logging.getLogger("ticket_intake.review")


class ExportResult(BaseModel):
    key: str
    url: str
    ticket_count: int


def _require_uid(uid: str | None) -> str:
    if not uid or not uid.strip():
        raise UnauthenticatedError("Sign-in required")
    return uid


def _require_ticket_id(ticket_id) -> str:
    if not ticket_id or not isinstance(ticket_id, str) or not ticket_id.strip():
        raise InvalidArgumentError("Invalid ticketId")
    return ticket_id


def _clean_fields(values: dict) -> dict:
    """Blank strings become None; weight is normalized like OCR output."""
    cleaned = {}
    for name, value in values.items():
        if isinstance(value, str):
            value = value.strip() or None
        if name == "weight_tons" and value is not None:
            normalized = normalize_weight(value)
            if normalized is None:
                raise InvalidArgumentError(f"Invalid weight: {value!r}")
            value = normalized
        cleaned[name] = value
    return cleaned


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds covering every instant from start's 00:00 to end's last microsecond."""
    if end < start:
        raise InvalidArgumentError("endDate must not be before startDate")
    lower = datetime.combine(start, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(end, time.max, tzinfo=timezone.utc)
    return lower, upper


class ReviewService:
    def __init__(
        self,
        tickets: TicketStore,
        blobs: BlobStore,
        exporter: TicketExporter,
        export_prefix: str = "exports",
        history_limit: int = 50,
        now: Callable[[], datetime] = utcnow,
    ):
        self.tickets = tickets
        self.blobs = blobs
        self.exporter = exporter
        self.export_prefix = export_prefix
        self.history_limit = history_limit
        self.now = now

    # --- Lookups ---

    def get(self, ticket_id: str) -> Ticket:
        ticket_id = _require_ticket_id(ticket_id)
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def fix_queue(self) -> list[Ticket]:
        return self.tickets.list_tickets(fix_needed=True)

    def pending(self) -> list[Ticket]:
        return self.tickets.list_tickets(status=TicketStatus.PENDING)

    def driver_history(self, uploader_uid: str) -> list[Ticket]:
        uploader_uid = _require_uid(uploader_uid)
        tickets = self.tickets.list_tickets(uploader_uid=uploader_uid)
        return list(reversed(tickets))[: self.history_limit]

    def search(self, start: date, end: date, status: TicketStatus | None = None) -> list[Ticket]:
        lower, upper = day_bounds(start, end)
        return self.tickets.list_tickets(status=status, created_from=lower, created_to=upper)

    def stats(self) -> TicketStats:
        now = self.now()
        start_of_today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
        approved = self.tickets.list_tickets(status=TicketStatus.APPROVED)
        return TicketStats(
            pending=len(self.pending()),
            fix_needed=len(self.fix_queue()),
            approved_today=sum(
                1 for t in approved if t.reviewed_at is not None and t.reviewed_at >= start_of_today
            ),
            approved_total=len(approved),
        )

    def missing_storage_paths(self) -> list[Ticket]:
        return [t for t in self.tickets.all() if not t.manual and not t.storage_path]

    # --- Review callables ---

    def submit_fix(self, ticket_id: str, fix: TicketFix | dict, reviewer_uid: str | None) -> Ticket:
        reviewer_uid = _require_uid(reviewer_uid)
        ticket = self._reviewable(ticket_id)
        if isinstance(fix, dict):
            try:
                fix = TicketFix(**fix)
            except ValueError as e:
                raise InvalidArgumentError(f"Invalid updates: {e}") from e

        updates = _clean_fields(fix.model_dump(exclude_unset=True))
        fields = ticket.fields.model_copy(update=updates)
        missing = fields.missing_required()
        if missing:
            raise InvalidArgumentError(f"Fix leaves required fields empty: {missing}")

        updated = self.tickets.update(ticket.id, {
            "fields": fields,
            "status": TicketStatus.PENDING,
            "fix_needed": False,
            "reviewed_by": reviewer_uid,
            "reviewed_at": self.now(),
        })
        logger.info(f"Ticket {ticket.id} fixed by {reviewer_uid}: {sorted(updates)}")
        return updated

    def approve(self, ticket_id: str, reviewer_uid: str | None) -> Ticket:
        reviewer_uid = _require_uid(reviewer_uid)
        ticket = self._reviewable(ticket_id)
        updated = self.tickets.update(ticket.id, {
            "status": TicketStatus.APPROVED,
            "fix_needed": False,
            "reviewed_by": reviewer_uid,
            "reviewed_at": self.now(),
        })
        logger.info(f"Ticket {ticket.id} approved by {reviewer_uid}")
        return updated

    def reject(self, ticket_id: str, reviewer_uid: str | None) -> Ticket:
        reviewer_uid = _require_uid(reviewer_uid)
        ticket = self._reviewable(ticket_id)
        updated = self.tickets.update(ticket.id, {
            "status": TicketStatus.REJECTED,
            "reviewed_by": reviewer_uid,
            "reviewed_at": self.now(),
        })
        logger.info(f"Ticket {ticket.id} rejected by {reviewer_uid}")
        return updated

    def create_manual(
        self,
        entry: ManualTicket,
        uploader_uid: str | None,
        uploader_email: str | None = None,
    ) -> Ticket:
        uploader_uid = _require_uid(uploader_uid)
        fields = ExtractedFields(**_clean_fields(entry.model_dump()))
        ticket = self.tickets.create(Ticket(
            uploader_uid=uploader_uid,
            uploader_email=uploader_email,
            created_at=self.now(),
            status=TicketStatus.DRAFT if fields.needs_fix else TicketStatus.PENDING,
            fix_needed=fields.needs_fix,
            manual=True,
            fields=fields,
        ))
        logger.info(f"Manual ticket {ticket.id} created by {uploader_uid}")
        return ticket

    # --- Export ---

    def export_xlsx(self, start: date, end: date) -> ExportResult:
        tickets = self.search(start, end)
        content = self.exporter.export(tickets)
        stamp = self.now().strftime("%Y%m%dT%H%M%S")
        key = (
            f"{self.export_prefix}/tickets_{start.isoformat()}_{end.isoformat()}_{stamp}"
            f".{self.exporter.extension}"
        )
        self.blobs.put(key, content, content_type=self.exporter.content_type)
        logger.info(f"Exported {len(tickets)} tickets to {key}")
        return ExportResult(key=key, url=self.blobs.url_for(key), ticket_count=len(tickets))

    def _reviewable(self, ticket_id: str) -> Ticket:
        ticket = self.get(ticket_id)
        if ticket.status == TicketStatus.PROCESSING_OCR:
            raise TicketStateError(f"Ticket {ticket.id} is still being processed")
        return ticket
