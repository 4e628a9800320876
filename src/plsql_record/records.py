"""
PL/SQL Record Binds

Helpers for building, binding and reading Oracle object values that
represent PL/SQL RECORD types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

import oracledb

from plsql_record.exceptions import RecordTypeError

# A record type is either the descriptor returned by Connection.gettype()
# or its qualified name, e.g. "RECTEST.RECTYPE"
RecordTypeRef = Union[oracledb.DbObjectType, str]


class BindDirection(Enum):
    """Direction of a bind variable."""
    IN = "in"
    OUT = "out"
    INOUT = "inout"


@dataclass
class RecordBind:
    """
    A record value tagged with its type and bind direction.

    value may be a mapping of field name to value, a DbObject, or None
    for OUT binds.
    """
    type: RecordTypeRef
    value: Any = None
    direction: BindDirection = BindDirection.IN

    @property
    def is_out(self) -> bool:
        return self.direction in (BindDirection.OUT, BindDirection.INOUT)


def make_record(rec_type: oracledb.DbObjectType, values: Mapping[str, Any]) -> oracledb.DbObject:
    """
    Create a record instance from field values.

    Args:
        rec_type: Record type descriptor
        values: Field name to value, e.g. {"NAME": "Ship", "POS": 12}

    Returns:
        New DbObject with the fields set

    Raises:
        RecordTypeError: If a field is not an attribute of the type
    """
    field_names = {attr.name for attr in rec_type.attributes}
    record = rec_type.newobject()
    for name, value in values.items():
        field = name.upper()
        if field not in field_names:
            raise RecordTypeError(f"{type_name(rec_type)} has no field {name!r}")
        setattr(record, field, value)
    return record


def record_to_dict(record: Optional[oracledb.DbObject]) -> Optional[Dict[str, Any]]:
    """Field name to value for a record instance."""
    if record is None:
        return None
    return {attr.name: getattr(record, attr.name) for attr in record.type.attributes}


def type_name(rec_type: RecordTypeRef) -> str:
    """Qualified name of a record type reference."""
    if isinstance(rec_type, str):
        return rec_type.upper()
    if rec_type.package_name:
        return f"{rec_type.schema}.{rec_type.package_name}.{rec_type.name}"
    return f"{rec_type.schema}.{rec_type.name}"
