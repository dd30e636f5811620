import logging
from datetime import datetime
from typing import Callable

import opik

from src.nodes.base import BaseNode
from src.services.tickets.base import TicketStore
from src.core.ticket import ExtractedFields, TicketStatus, utcnow
from src.core.workflow_state import TicketWorkflowState

logger = logging.getLogger("ticket_intake.ingest")


class PersistNode(BaseNode):
    """Writes the OCR outcome onto the ticket and sets its review status."""
    name = "persist"

    def __init__(self, tickets: TicketStore, now: Callable[[], datetime] = utcnow):
        self.tickets = tickets
        self.now = now

    @opik.track(name="persist_node")
    def __call__(self, state: TicketWorkflowState) -> dict:
        ticket_id = state.get("ticket_id")
        if not ticket_id:
            return {"trajectory": self.visited(state)}

        if state.get("final_status") == "error":
            return self._record_error(ticket_id, state)

        try:
            fields = ExtractedFields(**(state.get("extracted_fields") or {}))
            needs_fix = state.get("needs_fix", fields.needs_fix)
            status = TicketStatus.DRAFT if needs_fix else TicketStatus.PENDING

            self.tickets.update(ticket_id, {
                "fields": fields,
                "status": status,
                "fix_needed": needs_fix,
                "ocr_processed_at": self.now(),
            })
            logger.info(f"Processed ticket {ticket_id}: status={status.value}")

            return {
                "ticket_status": status.value,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"PersistNode failed: {e}",
                "trajectory": self.visited(state),
            }

    def _record_error(self, ticket_id: str, state: TicketWorkflowState) -> dict:
        try:
            self.tickets.update(ticket_id, {
                "status": TicketStatus.OCR_ERROR,
                "fix_needed": True,
                "ocr_error": state.get("error_message", ""),
                "ocr_processed_at": self.now(),
            })
        except Exception as e:
            logger.error(f"Failed to record OCR error on ticket {ticket_id}: {e}")
            return {"trajectory": self.visited(state)}
        return {
            "ticket_status": TicketStatus.OCR_ERROR.value,
            "trajectory": self.visited(state),
        }
