"""
PL/SQL Record Binding Example

Shows how to bind Oracle PL/SQL RECORD types with python-oracledb.
"""

__version__ = "1.0.0"

from plsql_record.config import DatabaseConfig
from plsql_record.connection import RecordConnection
from plsql_record.records import (
    BindDirection,
    RecordBind,
    make_record,
    record_to_dict,
)
from plsql_record.exceptions import (
    DatabaseError,
    DatabaseConnectionError,
    QueryError,
    RecordTypeError,
    ConfigError,
)

__all__ = [
    "DatabaseConfig",
    "RecordConnection",
    "BindDirection",
    "RecordBind",
    "make_record",
    "record_to_dict",
    "DatabaseError",
    "DatabaseConnectionError",
    "QueryError",
    "RecordTypeError",
    "ConfigError",
]
