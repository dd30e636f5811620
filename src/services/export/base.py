from abc import ABC, abstractmethod

from src.core.ticket import Ticket


class TicketExporter(ABC):
    content_type: str
    extension: str

    @abstractmethod
    def export(self, tickets: list[Ticket]) -> bytes:
        """Render tickets as a downloadable document."""
        ...
