import json
import threading
import uuid
from pathlib import Path

from src.core.errors import TicketNotFoundError
from src.core.ticket import Ticket
from src.services.tickets.base import TicketStore


class JsonFileTicketStore(TicketStore):
    """Keeps every ticket in a single JSON document on disk.

    File format:
        {"tickets": {"<id>": {...Ticket fields...}, ...}}

    Each write rewrites the whole file; a lock serializes read-modify-write
    cycles from concurrent ingestion tasks.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Ticket]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        return {
            ticket_id: Ticket.model_validate(raw)
            for ticket_id, raw in data.get("tickets", {}).items()
        }

    def _save(self, tickets: dict[str, Ticket]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "tickets": {
                ticket_id: ticket.model_dump(mode="json")
                for ticket_id, ticket in tickets.items()
            }
        }
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        tmp_path.replace(self._path)

    def create(self, ticket: Ticket) -> Ticket:
        with self._lock:
            tickets = self._load()
            ticket_id = ticket.id or uuid.uuid4().hex
            stored = ticket.model_copy(update={"id": ticket_id})
            tickets[ticket_id] = stored
            self._save(tickets)
        return stored

    def get(self, ticket_id: str) -> Ticket | None:
        with self._lock:
            return self._load().get(ticket_id)

    def update(self, ticket_id: str, changes: dict) -> Ticket:
        with self._lock:
            tickets = self._load()
            ticket = tickets.get(ticket_id)
            if ticket is None:
                raise TicketNotFoundError(ticket_id)
            updated = self.apply_changes(ticket, changes)
            tickets[ticket_id] = updated
            self._save(tickets)
        return updated

    def all(self) -> list[Ticket]:
        with self._lock:
            return list(self._load().values())

    def find_or_create(self, ticket: Ticket) -> tuple[Ticket, bool]:
        with self._lock:
            tickets = self._load()
            existing = self._match_storage_path(tickets.values(), ticket.storage_path)
            if existing is not None:
                return existing, False
            ticket_id = ticket.id or uuid.uuid4().hex
            stored = ticket.model_copy(update={"id": ticket_id})
            tickets[ticket_id] = stored
            self._save(tickets)
        return stored, True
