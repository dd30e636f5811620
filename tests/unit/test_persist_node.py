"""Unit tests for PersistNode."""
from datetime import datetime, timezone
from unittest.mock import MagicMock

from src.core.ticket import Ticket, TicketStatus
from src.nodes.persist import PersistNode
from src.services.tickets.memory import InMemoryTicketStore
from tests.mocks import FrozenClock


def _store_with_ticket():
    tickets = InMemoryTicketStore()
    ticket = tickets.create(Ticket(
        storage_path="tickets/driver-1/a.jpg",
        uploader_uid="driver-1",
        created_at=datetime(2025, 4, 16, 15, 0, tzinfo=timezone.utc),
    ))
    return tickets, ticket.id


class TestPersistNode:
    def test_complete_fields_become_pending(self):
        tickets, ticket_id = _store_with_ticket()
        clock = FrozenClock()
        clock.advance(seconds=5)

        result = PersistNode(tickets, now=clock)({
            "ticket_id": ticket_id,
            "extracted_fields": {"ticket_number": "12345", "weight_tons": "3.5"},
            "needs_fix": False,
            "trajectory": ["validate"],
        })

        ticket = tickets.get(ticket_id)
        assert result["ticket_status"] == "pending"
        assert result["trajectory"] == ["validate", "persist"]
        assert ticket.status == TicketStatus.PENDING
        assert ticket.fix_needed is False
        assert ticket.fields.ticket_number == "12345"
        assert ticket.ocr_processed_at == clock.current

    def test_incomplete_fields_become_draft_needing_fix(self):
        tickets, ticket_id = _store_with_ticket()

        result = PersistNode(tickets)({
            "ticket_id": ticket_id,
            "extracted_fields": {"ticket_number": "12345"},
            "needs_fix": True,
            "trajectory": [],
        })

        ticket = tickets.get(ticket_id)
        assert result["ticket_status"] == "draft"
        assert ticket.status == TicketStatus.DRAFT
        assert ticket.fix_needed is True

    def test_ocr_error_is_recorded(self):
        tickets, ticket_id = _store_with_ticket()

        result = PersistNode(tickets)({
            "ticket_id": ticket_id,
            "final_status": "error",
            "error_message": "OCRNode failed: Blob not found",
            "trajectory": ["register", "ocr"],
        })

        ticket = tickets.get(ticket_id)
        assert result["ticket_status"] == "ocr_error"
        assert ticket.status == TicketStatus.OCR_ERROR
        assert ticket.fix_needed is True
        assert ticket.ocr_error == "OCRNode failed: Blob not found"
        assert ticket.ocr_processed_at is not None

    def test_no_ticket_passes_through(self):
        tickets = MagicMock()

        result = PersistNode(tickets)({"trajectory": ["register"]})

        tickets.update.assert_not_called()
        assert result == {"trajectory": ["register", "persist"]}

    def test_store_failure_sets_error(self):
        tickets = MagicMock()
        tickets.update.side_effect = RuntimeError("disk full")

        result = PersistNode(tickets)({
            "ticket_id": "t1",
            "extracted_fields": {"ticket_number": "12345", "weight_tons": "1"},
            "needs_fix": False,
            "trajectory": [],
        })

        assert result["final_status"] == "error"
        assert "PersistNode failed: disk full" == result["error_message"]

    def test_failure_recording_ocr_error_passes_through(self):
        tickets = MagicMock()
        tickets.update.side_effect = RuntimeError("disk full")

        result = PersistNode(tickets)({
            "ticket_id": "t1",
            "final_status": "error",
            "error_message": "OCRNode failed: boom",
            "trajectory": [],
        })

        assert result == {"trajectory": ["persist"]}
