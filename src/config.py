from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OCR
    ocr_engine: str = "tesseract"
    ocr_lang: str = "eng"

    # Blob store (uploaded photos and exports)
    blob_store: str = "local"  # "local" | "s3" | "memory"
    blob_dir: str = "data/blobs"
    s3_bucket: str = ""
    s3_region: str | None = None
    s3_endpoint_url: str | None = None
    upload_prefix: str = "tickets"
    export_prefix: str = "exports"

    # Ticket store
    ticket_store: str = "json"  # "json" | "memory"
    tickets_path: str = "data/tickets.json"

    # Intake
    upload_webhook_secret: str | None = None
    driver_history_limit: int = 50

    # Logging
    log_level: str = "INFO"

    # Opik
    opik_workspace: str | None = None
    opik_project: str = "ticket-intake"
    opik_api_key: str | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def for_eval(cls) -> "AppConfig":
        """Pre-configured for evaluation: text-passthrough OCR, in-memory stores."""
        return cls(
            ocr_engine="mock",
            blob_store="memory",
            ticket_store="memory",
            opik_project="ticket-intake-eval",
        )
