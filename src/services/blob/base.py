from abc import ABC, abstractmethod


class BlobStore(ABC):
    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str | None = None) -> str:
        """Store bytes under key. Returns the key."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Read the bytes stored under key. Raises FileNotFoundError if absent."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    def url_for(self, key: str) -> str:
        """Return a URL a browser can use to download the object."""
        ...
