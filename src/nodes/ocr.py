import logging

import opik

from src.nodes.base import BaseNode
from src.services.blob.base import BlobStore
from src.services.ocr.base import OCRService
from src.core.workflow_state import TicketWorkflowState

logger = logging.getLogger("ticket_intake.ingest")


class OCRNode(BaseNode):
    name = "ocr"

    def __init__(self, ocr: OCRService, blobs: BlobStore):
        self.ocr = ocr
        self.blobs = blobs

    @opik.track(name="ocr_node")
    def __call__(self, state: TicketWorkflowState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        storage_path = state.get("storage_path", "")
        try:
            image_bytes = self.blobs.get(storage_path)
            raw_text = self.ocr.extract_text(image_bytes)
            logger.info(f"FULL_OCR_TEXT for {storage_path}:\n{raw_text}")
            return {
                "raw_ocr_text": raw_text,
                "trajectory": self.visited(state),
            }
        except Exception as e:
            logger.error(f"OCR failed for {storage_path}: {e}")
            return {
                "final_status": "error",
                "error_message": f"OCRNode failed: {e}",
                "trajectory": self.visited(state),
            }
