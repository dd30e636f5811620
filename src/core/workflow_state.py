from typing import TypedDict


class TicketWorkflowState(TypedDict, total=False):
    # --- Input (populated from the upload event) ---
    storage_path: str
    content_type: str
    uploader_uid: str
    file_name: str

    # --- Registration ---
    ticket_id: str | None
    duplicate: bool

    # --- OCR & extraction ---
    raw_ocr_text: str
    extracted_fields: dict | None        # ExtractedFields.model_dump()

    # --- Validation ---
    missing_fields: list[str]
    needs_fix: bool

    # --- Persistence ---
    ticket_status: str                   # TicketStatus value written to the store
    trajectory: list[str]                # node names visited

    # --- Final ---
    error_message: str
    final_status: str                    # "pending" | "needs_fix" | "duplicate" | "error"
