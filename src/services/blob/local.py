from pathlib import Path

from src.services.blob.base import BlobStore


class LocalBlobStore(BlobStore):
    """Stores blobs as files below a base directory, keyed by relative path."""

    def __init__(self, base_dir: str | Path):
        self._base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        path = (self._base_dir / key).resolve()
        if not path.is_relative_to(self._base_dir.resolve()):
            raise ValueError(f"Blob key escapes the store: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: str | None = None) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return key

    def get(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise FileNotFoundError(f"Blob not found: {key}")
        return path.read_bytes()

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def url_for(self, key: str) -> str:
        return self._path(key).as_uri()
