"""Custom exceptions for MovR data generation."""


class MovrDataGenError(Exception):
    """Base exception for MovR data generation."""

    pass


class ConfigurationError(MovrDataGenError):
    """Invalid generation configuration, detected before any row is produced."""

    pass


class RowIndexError(MovrDataGenError, IndexError):
    """A row or city index outside the configured range was requested."""

    pass


class UnknownTableError(MovrDataGenError, KeyError):
    """No row generator is registered under the requested table name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class PostLoadConstraintError(MovrDataGenError):
    """Adding a foreign key constraint after the bulk load failed."""

    def __init__(self, message: str, statement: str = ""):
        self.message = message
        self.statement = statement
        super().__init__(message)
