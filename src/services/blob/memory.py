from src.services.blob.base import BlobStore


class InMemoryBlobStore(BlobStore):
    """Dict-backed blob store for tests and evaluation runs."""

    def __init__(self, blobs: dict[str, bytes] | None = None):
        self._blobs: dict[str, bytes] = dict(blobs or {})
        self._content_types: dict[str, str | None] = {}

    def put(self, key: str, data: bytes, content_type: str | None = None) -> str:
        self._blobs[key] = data
        self._content_types[key] = content_type
        return key

    def get(self, key: str) -> bytes:
        if key not in self._blobs:
            raise FileNotFoundError(f"Blob not found: {key}")
        return self._blobs[key]

    def exists(self, key: str) -> bool:
        return key in self._blobs

    def url_for(self, key: str) -> str:
        return f"memory://{key}"

    # --- Inspection API ---

    @property
    def keys(self) -> list[str]:
        return sorted(self._blobs)

    def content_type(self, key: str) -> str | None:
        return self._content_types.get(key)
