from .client import BudgetApiClient
from .errors import BudgetApiError, TransportError, UnauthorizedError

__all__ = [
    "BudgetApiClient",
    "BudgetApiError",
    "TransportError",
    "UnauthorizedError",
]
