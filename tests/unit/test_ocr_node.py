"""Unit tests for OCRNode."""
from src.nodes.ocr import OCRNode
from src.services.blob.memory import InMemoryBlobStore
from tests.mocks import MockOCR

PATH = "tickets/driver-1/a.jpg"


def _make_node(ocr=None, blobs=None):
    blobs = blobs if blobs is not None else InMemoryBlobStore({PATH: b"jpeg-bytes"})
    return OCRNode(ocr=ocr or MockOCR("Ticket #: 12345"), blobs=blobs)


class TestOCRNode:
    def test_reads_blob_and_returns_text(self):
        ocr = MockOCR("Ticket #: 12345\nWeight: 3")
        node = _make_node(ocr=ocr)

        result = node({"storage_path": PATH, "ticket_id": "t1", "trajectory": ["register"]})

        assert ocr.calls == [b"jpeg-bytes"]
        assert result["raw_ocr_text"] == "Ticket #: 12345\nWeight: 3"
        assert result["trajectory"] == ["register", "ocr"]
        assert "final_status" not in result

    def test_missing_blob_sets_error(self):
        node = _make_node(blobs=InMemoryBlobStore())

        result = node({"storage_path": PATH, "trajectory": []})

        assert result["final_status"] == "error"
        assert result["error_message"].startswith("OCRNode failed:")

    def test_engine_failure_sets_error(self):
        node = _make_node(ocr=MockOCR(should_raise=RuntimeError("tesseract not installed")))

        result = node({"storage_path": PATH, "trajectory": []})

        assert result["final_status"] == "error"
        assert "tesseract not installed" in result["error_message"]
        assert result["trajectory"] == ["ocr"]

    def test_skips_on_prior_error(self):
        ocr = MockOCR("text")
        result = _make_node(ocr=ocr)({"final_status": "error", "trajectory": ["register"]})

        assert ocr.calls == []
        assert result == {"trajectory": ["register", "ocr"]}
