import logging

import opik

from src.nodes.base import BaseNode
from src.core.extractor import extract
from src.core.workflow_state import TicketWorkflowState

logger = logging.getLogger("ticket_intake.ingest")


class ExtractNode(BaseNode):
    name = "extract"

    @opik.track(name="extract_node")
    def __call__(self, state: TicketWorkflowState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        fields = extract(state.get("raw_ocr_text", ""))
        logger.info(f"Extracted fields for ticket {state.get('ticket_id')}: {fields.model_dump()}")
        return {
            "extracted_fields": fields.model_dump(),
            "trajectory": self.visited(state),
        }
