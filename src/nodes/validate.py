import opik

from src.nodes.base import BaseNode
from src.core.ticket import ExtractedFields
from src.core.workflow_state import TicketWorkflowState


class ValidateNode(BaseNode):
    name = "validate"

    @opik.track(name="validate_node")
    def __call__(self, state: TicketWorkflowState) -> dict:
        if state.get("final_status") == "error":
            return {"trajectory": self.visited(state)}

        fields = ExtractedFields(**(state.get("extracted_fields") or {}))

        return {
            "missing_fields": fields.missing_required(),
            "needs_fix": fields.needs_fix,
            "trajectory": self.visited(state),
        }
