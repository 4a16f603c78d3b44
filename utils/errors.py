class FinanceError(Exception):
    """Base class for errors raised by the services layer."""


class AuthenticationError(FinanceError):
    """No signed-in user, or the credentials were rejected."""


class ValidationError(FinanceError, ValueError):
    """Caller input that breaks a data-model rule (amount, dates, counts...)."""


class PersistenceError(FinanceError):
    """The backing store rejected an operation or returned a malformed row."""
