"""Domain errors raised by the record store, user directory and integrations."""


class FiscalizaError(Exception):
    """Base class for every error the service raises on purpose."""


class NotFoundError(FiscalizaError):
    """An operation referenced an unknown inspection or user id."""

    def __init__(self, kind: str, ident: str):
        super().__init__(f"{kind} not found: {ident}")
        self.kind = kind
        self.ident = ident


class InvalidDataError(FiscalizaError):
    pass


class ConflictError(InvalidDataError):
    pass


class ExternalServiceError(FiscalizaError):
    """Summarization, object storage or external database unreachable/misconfigured."""
