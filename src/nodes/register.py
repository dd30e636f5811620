import logging
from datetime import datetime
from typing import Callable

import opik

from src.nodes.base import BaseNode
from src.services.tickets.base import TicketStore
from src.core.ticket import Ticket, TicketStatus, utcnow
from src.core.workflow_state import TicketWorkflowState

logger = logging.getLogger("ticket_intake.ingest")


class RegisterNode(BaseNode):
    """Creates the ticket record for an upload, at most once per storage path."""
    name = "register"

    def __init__(self, tickets: TicketStore, now: Callable[[], datetime] = utcnow):
        self.tickets = tickets
        self.now = now

    @opik.track(name="register_node")
    def __call__(self, state: TicketWorkflowState) -> dict:
        storage_path = state.get("storage_path", "")
        try:
            ticket, created = self.tickets.find_or_create(Ticket(
                storage_path=storage_path,
                uploader_uid=state.get("uploader_uid"),
                file_name=state.get("file_name"),
                content_type=state.get("content_type"),
                created_at=self.now(),
                status=TicketStatus.PROCESSING_OCR,
            ))
            if not created:
                logger.info(f"Ticket {ticket.id} already exists for {storage_path}, skipping")
            return {
                "ticket_id": ticket.id,
                "duplicate": not created,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            return {
                "final_status": "error",
                "error_message": f"RegisterNode failed: {e}",
                "trajectory": self.visited(state),
            }
