"""
Domain Error Hierarchy

Every error raised by domain code derives from DomainError. The three
families map one-to-one onto the outcomes reported to API clients:

- NotFoundError: the referenced record does not exist
- BusinessRuleViolation: the request is well formed but a rule rejects it
- ConflictError: the request clashes with the current state of the record
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    code = "domain_error"

    def __init__(self, message: str = "", **context):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.context = context

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class NotFoundError(DomainError):
    """Requested record does not exist."""

    code = "not_found"


class BusinessRuleViolation(DomainError):
    """Request rejected by a business rule."""

    code = "rule_violation"


class ConflictError(DomainError):
    """Request conflicts with the current state of the record."""

    code = "conflict"
