"""End-to-end runs of the compiled ingestion graph over in-memory services."""
from unittest.mock import patch

import pytest

from src.builder import WorkflowBuilder
from src.config import AppConfig
from src.core.ticket import TicketStatus

FULL_PATH = ["register", "ocr", "extract", "validate", "persist", "report"]


@pytest.fixture
def builder():
    return WorkflowBuilder(AppConfig.for_eval())


def _run(builder, text: bytes | None, path: str = "tickets/driver-1/a.jpg"):
    if text is not None:
        builder.blob_store.put(path, text, content_type="image/jpeg")
    return builder.build().invoke({
        "storage_path": path,
        "content_type": "image/jpeg",
        "uploader_uid": "driver-1",
        "file_name": "a.jpg",
        "trajectory": [],
    })


class TestIngestionWorkflow:
    def test_complete_ticket_lands_in_pending(self, builder):
        result = _run(builder, b"Ticket #: 12345\nWeight: 12,345.6\nDriver: Jane O'Brien")

        ticket = builder.ticket_store.get(result["ticket_id"])
        assert result["trajectory"] == FULL_PATH
        assert result["final_status"] == "pending"
        assert ticket.status == TicketStatus.PENDING
        assert ticket.fix_needed is False
        assert ticket.fields.weight_tons == "12345.6"
        assert ticket.fields.driver_actual == "Jane O'Brien"

    def test_incomplete_ticket_lands_in_fix_queue(self, builder):
        result = _run(builder, b"42\nWeight: 3.5")

        ticket = builder.ticket_store.get(result["ticket_id"])
        assert result["final_status"] == "needs_fix"
        assert result["missing_fields"] == ["ticket_number"]
        assert ticket.status == TicketStatus.DRAFT
        assert ticket.fix_needed is True

    def test_missing_photo_records_ocr_error(self, builder):
        result = _run(builder, None)

        ticket = builder.ticket_store.get(result["ticket_id"])
        assert result["trajectory"] == ["register", "ocr", "persist", "report"]
        assert result["final_status"] == "error"
        assert ticket.status == TicketStatus.OCR_ERROR
        assert ticket.fix_needed is True
        assert "Blob not found" in ticket.ocr_error

    def test_repeated_event_is_duplicate(self, builder):
        first = _run(builder, b"Ticket #: 12345\nWeight: 1")
        second = _run(builder, b"Ticket #: 12345\nWeight: 1")

        assert second["final_status"] == "duplicate"
        assert second["trajectory"] == ["register", "report"]
        assert second["ticket_id"] == first["ticket_id"]
        assert len(builder.ticket_store.all()) == 1

    def test_registration_failure_skips_processing(self, builder):
        with patch.object(builder.ticket_store, "find_or_create", side_effect=RuntimeError("down")):
            result = _run(builder, b"Ticket #: 12345")

        assert result["trajectory"] == ["register", "report"]
        assert result["final_status"] == "error"
        assert builder.ticket_store.all() == []
