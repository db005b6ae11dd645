"""Domain errors raised by repositories and rendered by the REST layer."""

from typing import Any, Dict


class BudgetError(Exception):
    """Base class for all expected failures of a budget operation."""
    status_code = 500

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}


class Unauthorized(BudgetError):
    status_code = 401


class AccessDenied(BudgetError):
    """The caller has no membership in the requested plan."""
    status_code = 403


class Forbidden(BudgetError):
    """The caller is a member but their role does not allow the operation."""
    status_code = 403


class NotFound(BudgetError):
    status_code = 404


class InvalidInput(BudgetError):
    status_code = 400


class InvalidTransfer(InvalidInput):
    pass


class InvalidState(BudgetError):
    status_code = 400


class Conflict(InvalidState):
    pass


class InvalidOrExpired(InvalidState):
    pass
