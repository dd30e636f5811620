"""LangGraph workflow definition for ticket ingestion.

Defines the graph structure: nodes, edges, and conditional routing.
"""
from langgraph.graph import StateGraph, END

from src.core.workflow_state import TicketWorkflowState
from src.nodes.register import RegisterNode
from src.nodes.ocr import OCRNode
from src.nodes.extract import ExtractNode
from src.nodes.validate import ValidateNode
from src.nodes.persist import PersistNode
from src.nodes.report import ReportNode


def should_continue_after_register(state: TicketWorkflowState) -> str:
    """Route after registration: skip duplicates and registration failures."""
    if state.get("duplicate") or state.get("final_status") == "error":
        return "report"
    return "ocr"


def should_continue_after_ocr(state: TicketWorkflowState) -> str:
    """Route after OCR: extract fields, or record the OCR error on the ticket."""
    if state.get("final_status") == "error":
        return "persist"
    return "extract"


def build_graph(
    register_node: RegisterNode,
    ocr_node: OCRNode,
    extract_node: ExtractNode,
    validate_node: ValidateNode,
    persist_node: PersistNode,
    report_node: ReportNode,
):
    """Build and compile the ticket ingestion graph.

    Graph structure:
        register → (duplicate?) → report
                 ↘ ocr → (error?) → persist → report
                       ↘ extract → validate → persist → report

    Returns a compiled LangGraph that can be invoked with a TicketWorkflowState.
    """
    graph = StateGraph(TicketWorkflowState)

    # Add nodes
    graph.add_node("register", register_node)
    graph.add_node("ocr", ocr_node)
    graph.add_node("extract", extract_node)
    graph.add_node("validate", validate_node)
    graph.add_node("persist", persist_node)
    graph.add_node("report", report_node)

    # Entry point
    graph.set_entry_point("register")

    # Conditional: after register, either OCR the upload or skip it
    graph.add_conditional_edges(
        "register",
        should_continue_after_register,
        {"ocr": "ocr", "report": "report"},
    )

    # Conditional: after OCR, either extract or go straight to persisting the error
    graph.add_conditional_edges(
        "ocr",
        should_continue_after_ocr,
        {"extract": "extract", "persist": "persist"},
    )

    # Linear: extract → validate → persist → report → END
    graph.add_edge("extract", "validate")
    graph.add_edge("validate", "persist")
    graph.add_edge("persist", "report")
    graph.add_edge("report", END)

    return graph.compile()
