"""WorkflowBuilder: wires services and nodes based on AppConfig."""
from src.config import AppConfig
from src.services.ocr.base import OCRService
from src.services.ocr.tesseract import TesseractOCR
from src.services.ocr.mock import MockOCR
from src.services.blob.base import BlobStore
from src.services.blob.local import LocalBlobStore
from src.services.blob.memory import InMemoryBlobStore
from src.services.blob.s3 import S3BlobStore
from src.services.tickets.base import TicketStore
from src.services.tickets.json_file import JsonFileTicketStore
from src.services.tickets.memory import InMemoryTicketStore
from src.services.export.xlsx import XlsxTicketExporter
from src.nodes.register import RegisterNode
from src.nodes.ocr import OCRNode
from src.nodes.extract import ExtractNode
from src.nodes.validate import ValidateNode
from src.nodes.persist import PersistNode
from src.nodes.report import ReportNode
from src.review import ReviewService
from src.workflow import build_graph


class WorkflowBuilder:
    """Builds the ingestion graph and review service by wiring services from config."""

    def __init__(self, config: AppConfig):
        self.config = config

        # Instantiate services
        self._ocr = self._build_ocr()
        self._blob_store = self._build_blob_store()
        self._ticket_store = self._build_ticket_store()

    @property
    def ticket_store(self) -> TicketStore:
        return self._ticket_store

    @property
    def blob_store(self) -> BlobStore:
        return self._blob_store

    def build(self):
        """Build and return a compiled LangGraph workflow."""
        return build_graph(
            register_node=RegisterNode(tickets=self._ticket_store),
            ocr_node=OCRNode(ocr=self._ocr, blobs=self._blob_store),
            extract_node=ExtractNode(),
            validate_node=ValidateNode(),
            persist_node=PersistNode(tickets=self._ticket_store),
            report_node=ReportNode(),
        )

    def build_review_service(self) -> ReviewService:
        return ReviewService(
            tickets=self._ticket_store,
            blobs=self._blob_store,
            exporter=XlsxTicketExporter(),
            export_prefix=self.config.export_prefix,
            history_limit=self.config.driver_history_limit,
        )

    def _build_ocr(self) -> OCRService:
        if self.config.ocr_engine == "tesseract":
            return TesseractOCR(lang=self.config.ocr_lang)
        if self.config.ocr_engine == "mock":
            return MockOCR()
        raise ValueError(f"Unknown OCR engine: {self.config.ocr_engine}")

    def _build_blob_store(self) -> BlobStore:
        if self.config.blob_store == "local":
            return LocalBlobStore(self.config.blob_dir)
        if self.config.blob_store == "memory":
            return InMemoryBlobStore()
        if self.config.blob_store == "s3":
            if not self.config.s3_bucket:
                raise ValueError("s3_bucket is required when blob_store is 's3'")
            return S3BlobStore(
                bucket=self.config.s3_bucket,
                region=self.config.s3_region,
                endpoint_url=self.config.s3_endpoint_url,
            )
        raise ValueError(f"Unknown blob store: {self.config.blob_store}")

    def _build_ticket_store(self) -> TicketStore:
        if self.config.ticket_store == "json":
            return JsonFileTicketStore(self.config.tickets_path)
        if self.config.ticket_store == "memory":
            return InMemoryTicketStore()
        raise ValueError(f"Unknown ticket store: {self.config.ticket_store}")
