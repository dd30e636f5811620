class TicketError(Exception):
    """Base class for ticket review errors."""


class UnauthenticatedError(TicketError):
    """Raised when an operation is called without a caller identity."""


class InvalidArgumentError(TicketError):
    """Raised when an operation receives a malformed argument."""


class TicketNotFoundError(TicketError):
    def __init__(self, ticket_id: str):
        super().__init__(f"Ticket '{ticket_id}' not found")
        self.ticket_id = ticket_id


class TicketStateError(TicketError):
    """Raised when a ticket's status does not allow the requested operation."""
