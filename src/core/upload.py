from pathlib import PurePosixPath

from pydantic import BaseModel

UNKNOWN_UPLOADER = "unknown_uid"


class TicketUpload(BaseModel):
    """An uploaded ticket photo, ready for ingestion."""
    storage_path: str
    uploader_uid: str
    file_name: str
    content_type: str | None = None

    @property
    def is_image(self) -> bool:
        return bool(self.content_type) and self.content_type.startswith("image/")


# --- Storage "object finalized" event models ---


class StorageObjectData(BaseModel):
    name: str
    bucket: str | None = None
    contentType: str | None = None
    resourceState: str | None = None
    size: int | None = None


class StorageEventMetadata(BaseModel):
    event_type: str | None = None


class StorageEventPayload(BaseModel):
    """Pydantic model for validating a blob-store object event.

    The object fields sit under `data`; an event for a deleted object carries
    resourceState "not_exists".
    """
    metadata: StorageEventMetadata | None = None
    data: StorageObjectData

    @property
    def is_deletion(self) -> bool:
        return self.data.resourceState == "not_exists"


def upload_from_path(storage_path: str, content_type: str | None = None) -> TicketUpload:
    """Build a TicketUpload from a path laid out as <prefix>/<uploader_uid>/<file>."""
    parts = storage_path.split("/")
    uploader_uid = parts[1] if len(parts) > 1 and parts[1] else UNKNOWN_UPLOADER
    return TicketUpload(
        storage_path=storage_path,
        uploader_uid=uploader_uid,
        file_name=PurePosixPath(storage_path).name,
        content_type=content_type,
    )


def parse_storage_event(payload: StorageEventPayload) -> TicketUpload:
    """Convert a validated storage event into our domain model."""
    return upload_from_path(payload.data.name, payload.data.contentType)
