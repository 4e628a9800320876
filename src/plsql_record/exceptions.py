"""
PL/SQL Record Example Exceptions

Exception hierarchy wrapping python-oracledb errors.
"""

from typing import Optional


class DatabaseError(Exception):
    """Base database exception."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    @classmethod
    def from_driver(cls, message: str, error: Exception) -> "DatabaseError":
        """
        Build an exception from an oracledb error.

        The driver stores an error object as the first argument; its
        full_code (e.g. "ORA-06550") is kept when present.
        """
        code = None
        if error.args:
            code = getattr(error.args[0], "full_code", None)
        return cls(f"{message}: {error}", code=code)


class DatabaseConnectionError(DatabaseError):
    """Error opening or closing a database connection."""
    pass


class QueryError(DatabaseError):
    """Error executing a statement."""
    pass


class RecordTypeError(DatabaseError):
    """Record type lookup failed or a record field does not exist."""
    pass


class ConfigError(Exception):
    """Invalid or incomplete configuration."""
    pass
