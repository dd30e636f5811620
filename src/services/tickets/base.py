from abc import ABC, abstractmethod
from datetime import datetime

from src.core.ticket import Ticket, TicketStatus


class TicketStore(ABC):
    """Document store for ticket records.

    Implementations only provide the four primitives; filtering and lookups
    are derived from `all()`.
    """

    @abstractmethod
    def create(self, ticket: Ticket) -> Ticket:
        """Persist a new ticket, assigning its id. Returns the stored ticket."""
        ...

    @abstractmethod
    def get(self, ticket_id: str) -> Ticket | None:
        ...

    @abstractmethod
    def update(self, ticket_id: str, changes: dict) -> Ticket:
        """Apply field changes to a ticket. Raises TicketNotFoundError for unknown ids."""
        ...

    @abstractmethod
    def all(self) -> list[Ticket]:
        ...

    @abstractmethod
    def find_or_create(self, ticket: Ticket) -> tuple[Ticket, bool]:
        """Return the ticket already stored for `ticket.storage_path`, or create `ticket`.

        The lookup and the insert happen atomically. The flag is True when a
        new ticket was created.
        """
        ...

    def list_tickets(
        self,
        status: TicketStatus | None = None,
        fix_needed: bool | None = None,
        uploader_uid: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> list[Ticket]:
        """Return tickets matching every given filter, oldest first."""
        tickets = []
        for ticket in self.all():
            if status is not None and ticket.status != status:
                continue
            if fix_needed is not None and ticket.fix_needed != fix_needed:
                continue
            if uploader_uid is not None and ticket.uploader_uid != uploader_uid:
                continue
            if created_from is not None and ticket.created_at < created_from:
                continue
            if created_to is not None and ticket.created_at > created_to:
                continue
            tickets.append(ticket)
        return sorted(tickets, key=lambda t: t.created_at)

    def find_by_storage_path(self, storage_path: str) -> Ticket | None:
        return self._match_storage_path(self.all(), storage_path)

    @staticmethod
    def _match_storage_path(tickets, storage_path: str) -> Ticket | None:
        for ticket in tickets:
            if ticket.storage_path == storage_path:
                return ticket
        return None

    @staticmethod
    def apply_changes(ticket: Ticket, changes: dict) -> Ticket:
        return Ticket.model_validate({**ticket.model_dump(), **changes})
