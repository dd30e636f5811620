"""Unit tests for upload event parsing."""
import pytest
from pydantic import ValidationError

from src.core.upload import (
    UNKNOWN_UPLOADER,
    StorageEventPayload,
    TicketUpload,
    parse_storage_event,
    upload_from_path,
)


class TestUploadFromPath:
    def test_uploader_from_second_segment(self):
        upload = upload_from_path("tickets/driver-42/1713279600000_ticket.jpg", "image/jpeg")
        assert upload.uploader_uid == "driver-42"
        assert upload.file_name == "1713279600000_ticket.jpg"
        assert upload.content_type == "image/jpeg"

    def test_single_segment_path_has_unknown_uploader(self):
        upload = upload_from_path("ticket.jpg")
        assert upload.uploader_uid == UNKNOWN_UPLOADER
        assert upload.file_name == "ticket.jpg"

    def test_empty_uploader_segment(self):
        assert upload_from_path("tickets//a.jpg").uploader_uid == UNKNOWN_UPLOADER


class TestTicketUpload:
    @pytest.mark.parametrize("content_type, expected", [
        ("image/jpeg", True),
        ("image/png", True),
        ("application/pdf", False),
        (None, False),
        ("", False),
    ])
    def test_is_image(self, content_type, expected):
        upload = TicketUpload(storage_path="t/u/a", uploader_uid="u", file_name="a", content_type=content_type)
        assert upload.is_image is expected


class TestStorageEvent:
    def test_parse_finalized_event(self):
        payload = StorageEventPayload(**{
            "metadata": {"event_type": "object.finalized"},
            "data": {
                "name": "tickets/driver-1/photo.png",
                "bucket": "intake",
                "contentType": "image/png",
                "size": 2048,
            },
        })

        upload = parse_storage_event(payload)

        assert payload.is_deletion is False
        assert upload.storage_path == "tickets/driver-1/photo.png"
        assert upload.uploader_uid == "driver-1"
        assert upload.is_image is True

    def test_deletion_event(self):
        payload = StorageEventPayload(data={"name": "tickets/u/a.jpg", "resourceState": "not_exists"})
        assert payload.is_deletion is True

    def test_metadata_optional(self):
        payload = StorageEventPayload(data={"name": "tickets/u/a.jpg"})
        assert payload.metadata is None

    def test_missing_name_rejected(self):
        with pytest.raises(ValidationError):
            StorageEventPayload(data={"contentType": "image/jpeg"})
