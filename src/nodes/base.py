from abc import ABC, abstractmethod
from src.core.workflow_state import TicketWorkflowState


class BaseNode(ABC):
    """Base class for all ingestion workflow nodes.

    Subclasses must set `name` as a class variable (str) and implement `__call__`.
    """

    name: str  # Class variable, set by each subclass (e.g. name = "extract")

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not getattr(cls, 'name', None) and 'Abstract' not in cls.__name__:
            raise TypeError(f"{cls.__name__} must define a 'name' class variable")

    def visited(self, state: TicketWorkflowState) -> list[str]:
        return state.get("trajectory", []) + [self.name]

    @abstractmethod
    def __call__(self, state: TicketWorkflowState) -> dict:
        """Execute node logic. Returns a dict that updates the state."""
        ...
