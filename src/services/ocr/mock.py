from src.services.ocr.base import OCRService


class MockOCR(OCRService):
    """Treats the uploaded bytes as already-recognized UTF-8 text.

    Lets evaluation runs and local demos feed OCR output straight into the
    ingestion workflow. Captures every call for inspection.
    """

    def __init__(self):
        self._calls: list[bytes] = []

    def extract_text(self, image_bytes: bytes) -> str:
        self._calls.append(image_bytes)
        return image_bytes.decode("utf-8", errors="replace").strip()

    @property
    def call_count(self) -> int:
        return len(self._calls)
