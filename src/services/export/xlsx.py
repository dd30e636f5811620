from datetime import datetime, timezone
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from src.core.ticket import Ticket
from src.services.export.base import TicketExporter

COLUMNS = [
    "Ticket ID",
    "Ticket Number",
    "Submitted",
    "Status",
    "Fix Needed",
    "Manual",
    "Truck Number",
    "Driver",
    "Driver Badge",
    "Weight (tons)",
    "Debris Type",
    "Uploader",
    "Reviewed By",
    "Reviewed At",
]


def _excel_datetime(value: datetime | None) -> datetime | None:
    # Excel cells cannot hold tz-aware datetimes
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class XlsxTicketExporter(TicketExporter):
    """Writes tickets to a single-sheet XLSX workbook with openpyxl."""

    content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def __init__(self, sheet_title: str = "Tickets"):
        self._sheet_title = sheet_title

    def export(self, tickets: list[Ticket]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self._sheet_title
        sheet.append(COLUMNS)
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        sheet.freeze_panes = "A2"

        for ticket in tickets:
            sheet.append(self._row(ticket))

        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def _row(ticket: Ticket) -> list:
        fields = ticket.fields
        return [
            ticket.id,
            fields.ticket_number,
            _excel_datetime(ticket.created_at),
            ticket.status.value,
            ticket.fix_needed,
            ticket.manual,
            fields.truck_number,
            fields.driver_actual,
            fields.driver_badge,
            fields.weight_decimal,
            fields.debris_type,
            ticket.uploader_email or ticket.uploader_uid,
            ticket.reviewed_by,
            _excel_datetime(ticket.reviewed_at),
        ]
