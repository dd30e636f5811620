import hashlib
import hmac
import json
import logging
from datetime import date
from pathlib import Path

from fastapi import FastAPI, BackgroundTasks, Depends, File, Header, HTTPException, Request, UploadFile
import opik
from pydantic import BaseModel

from src.config import AppConfig
from src.builder import WorkflowBuilder
from src.core.errors import (
    InvalidArgumentError,
    TicketError,
    TicketNotFoundError,
    TicketStateError,
    UnauthenticatedError,
)
from src.core.ticket import ManualTicket, Ticket, TicketFix, TicketStats, TicketStatus, utcnow
from src.core.upload import StorageEventPayload, TicketUpload, parse_storage_event, upload_from_path

logger = logging.getLogger("ticket_intake.api")

CONFIG_PATH = Path("config.yaml")

_ERROR_STATUS = {
    UnauthenticatedError: 401,
    InvalidArgumentError: 400,
    TicketNotFoundError: 404,
    TicketStateError: 409,
}


class ExportRequest(BaseModel):
    start_date: date
    end_date: date


def _verify_signature(body: bytes, secret: str, headers: dict[str, str]) -> None:
    """Verify an upload event signature. Raises HTTPException(401) on failure."""
    webhook_id = headers.get("webhook-id", "")
    timestamp = headers.get("webhook-timestamp", "")
    signature_header = headers.get("webhook-signature", "")

    if not webhook_id or not timestamp or not signature_header:
        raise HTTPException(status_code=401, detail="Missing webhook signature headers")

    to_sign = f"{webhook_id}.{timestamp}.{body.decode()}"
    expected = hmac.new(secret.encode(), to_sign.encode(), hashlib.sha256).hexdigest()

    # signature_header format: "v1,<hex_signature>"
    parts = signature_header.split(",", 1)
    if len(parts) != 2:
        raise HTTPException(status_code=401, detail="Invalid signature format")

    received = parts[1]
    if not hmac.compare_digest(expected, received):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")


def _http_error(error: TicketError) -> HTTPException:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def caller_uid(x_user_id: str | None = Header(default=None)) -> str | None:
    return x_user_id


def caller_email(x_user_email: str | None = Header(default=None)) -> str | None:
    return x_user_email


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Factory function for creating the FastAPI app with config."""
    if config is None:
        config = AppConfig.from_yaml(CONFIG_PATH) if CONFIG_PATH.exists() else AppConfig()

    logging.basicConfig(level=config.log_level)

    builder = WorkflowBuilder(config)
    workflow = builder.build()
    blob_store = builder.blob_store
    review = builder.build_review_service()
    webhook_secret = config.upload_webhook_secret

    app = FastAPI(title="Ticket Intake")

    @opik.track(name="ticket_ingestion", project_name=config.opik_project)
    def process_upload(upload: TicketUpload):
        """Background task: runs the ingestion workflow (OCR can take several seconds)."""
        input_state = {
            "storage_path": upload.storage_path,
            "content_type": upload.content_type or "",
            "uploader_uid": upload.uploader_uid,
            "file_name": upload.file_name,
            "trajectory": [],
        }

        result = workflow.invoke(input_state)
        logger.info(
            f"Ingestion completed: status={result.get('final_status')}, "
            f"ticket_id={result.get('ticket_id')}, path={upload.storage_path}"
        )
        return result

    @app.post("/events/storage", status_code=202)
    async def handle_storage_event(request: Request, background_tasks: BackgroundTasks):
        """Receive a blob-store object event. Returns immediately, ingests in background."""
        body = await request.body()

        # Verify signature if secret is configured
        if webhook_secret:
            _verify_signature(body, webhook_secret, dict(request.headers))

        # Parse and validate payload
        try:
            payload = StorageEventPayload(**json.loads(body))
        except (json.JSONDecodeError, Exception) as e:
            raise HTTPException(status_code=422, detail=str(e))

        upload = parse_storage_event(payload)
        logger.info(f"Storage event for {upload.storage_path}: content_type={upload.content_type}")

        if payload.is_deletion or not upload.is_image:
            return {"status": "ignored", "storage_path": upload.storage_path}

        background_tasks.add_task(process_upload, upload)
        return {"status": "accepted", "storage_path": upload.storage_path}

    @app.post("/uploads", status_code=202)
    async def upload_ticket_photo(
        background_tasks: BackgroundTasks,
        file: UploadFile = File(...),
        uid: str | None = Depends(caller_uid),
    ):
        """Store a driver's ticket photo and queue it for ingestion."""
        if not uid:
            raise HTTPException(status_code=401, detail="Sign-in required")
        if not file.content_type or not file.content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail=f"Unsupported content type: {file.content_type}")

        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail="Empty upload")

        file_name = Path(file.filename or "ticket.jpg").name
        stamp = int(utcnow().timestamp() * 1000)
        storage_path = f"{config.upload_prefix}/{uid}/{stamp}_{file_name}"
        blob_store.put(storage_path, content, content_type=file.content_type)

        upload = upload_from_path(storage_path, file.content_type)
        background_tasks.add_task(process_upload, upload)
        return {"status": "accepted", "storage_path": storage_path}

    @app.post("/tickets/manual", status_code=201, response_model=Ticket)
    def create_manual_ticket(
        entry: ManualTicket,
        uid: str | None = Depends(caller_uid),
        email: str | None = Depends(caller_email),
    ):
        try:
            return review.create_manual(entry, uploader_uid=uid, uploader_email=email)
        except TicketError as e:
            raise _http_error(e)

    @app.get("/tickets", response_model=list[Ticket])
    def search_tickets(start: date, end: date, status: TicketStatus | None = None):
        try:
            return review.search(start, end, status)
        except TicketError as e:
            raise _http_error(e)

    @app.get("/tickets/{ticket_id}", response_model=Ticket)
    def get_ticket(ticket_id: str):
        try:
            return review.get(ticket_id)
        except TicketError as e:
            raise _http_error(e)

    @app.post("/tickets/{ticket_id}/fix", response_model=Ticket)
    def submit_fix(ticket_id: str, fix: TicketFix, uid: str | None = Depends(caller_uid)):
        try:
            return review.submit_fix(ticket_id, fix, reviewer_uid=uid)
        except TicketError as e:
            raise _http_error(e)

    @app.post("/tickets/{ticket_id}/approve", response_model=Ticket)
    def approve_ticket(ticket_id: str, uid: str | None = Depends(caller_uid)):
        try:
            return review.approve(ticket_id, reviewer_uid=uid)
        except TicketError as e:
            raise _http_error(e)

    @app.post("/tickets/{ticket_id}/reject", response_model=Ticket)
    def reject_ticket(ticket_id: str, uid: str | None = Depends(caller_uid)):
        try:
            return review.reject(ticket_id, reviewer_uid=uid)
        except TicketError as e:
            raise _http_error(e)

    @app.get("/queues/fix", response_model=list[Ticket])
    def fix_queue():
        return review.fix_queue()

    @app.get("/queues/pending", response_model=list[Ticket])
    def pending_queue():
        return review.pending()

    @app.get("/stats", response_model=TicketStats)
    def ticket_stats():
        return review.stats()

    @app.get("/drivers/{driver_uid}/tickets", response_model=list[Ticket])
    def driver_history(driver_uid: str):
        try:
            return review.driver_history(driver_uid)
        except TicketError as e:
            raise _http_error(e)

    @app.post("/exports")
    def export_tickets(request: ExportRequest, uid: str | None = Depends(caller_uid)):
        if not uid:
            raise HTTPException(status_code=401, detail="Sign-in required")
        try:
            result = review.export_xlsx(request.start_date, request.end_date)
        except TicketError as e:
            raise _http_error(e)
        return result.model_dump()

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


# Module-level app instance for uvicorn (CMD: uvicorn src.api:app)
app = create_app()
