import threading
import uuid

from src.core.errors import TicketNotFoundError
from src.core.ticket import Ticket
from src.services.tickets.base import TicketStore


class InMemoryTicketStore(TicketStore):
    """Inspectable in-process store for tests and evaluation runs."""

    def __init__(self):
        self._tickets: dict[str, Ticket] = {}
        self._lock = threading.Lock()

    def _insert(self, ticket: Ticket) -> Ticket:
        ticket_id = ticket.id or uuid.uuid4().hex
        stored = ticket.model_copy(update={"id": ticket_id})
        self._tickets[ticket_id] = stored
        return stored

    def create(self, ticket: Ticket) -> Ticket:
        with self._lock:
            return self._insert(ticket)

    def get(self, ticket_id: str) -> Ticket | None:
        return self._tickets.get(ticket_id)

    def update(self, ticket_id: str, changes: dict) -> Ticket:
        with self._lock:
            ticket = self._tickets.get(ticket_id)
            if ticket is None:
                raise TicketNotFoundError(ticket_id)
            updated = self.apply_changes(ticket, changes)
            self._tickets[ticket_id] = updated
        return updated

    def all(self) -> list[Ticket]:
        with self._lock:
            return list(self._tickets.values())

    def find_or_create(self, ticket: Ticket) -> tuple[Ticket, bool]:
        with self._lock:
            existing = self._match_storage_path(self._tickets.values(), ticket.storage_path)
            if existing is not None:
                return existing, False
            return self._insert(ticket), True

    def reset(self):
        self._tickets.clear()
