import opik

from src.nodes.base import BaseNode
from src.core.workflow_state import TicketWorkflowState


class ReportNode(BaseNode):
    name = "report"

    @opik.track(name="report_node")
    def __call__(self, state: TicketWorkflowState) -> dict:
        if state.get("error_message"):
            final_status = "error"
        elif state.get("duplicate"):
            final_status = "duplicate"
        elif state.get("needs_fix"):
            final_status = "needs_fix"
        else:
            final_status = "pending"

        return {
            "final_status": final_status,
            "trajectory": self.visited(state),
        }
