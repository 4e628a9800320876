"""
Oracle Database Connection

Wraps a single oracledb connection with async methods for executing
statements whose binds include PL/SQL record values.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import oracledb

from plsql_record.config import DatabaseConfig
from plsql_record.exceptions import DatabaseConnectionError, QueryError, RecordTypeError
from plsql_record.records import RecordBind, RecordTypeRef, make_record

logger = logging.getLogger("plsql_record.database")


class RecordConnection:
    """
    Oracle connection with record-aware binding.

    Bind values may be RecordBind wrappers, DbObjects or plain scalars.
    Record types given by name are looked up once and cached.
    """

    def __init__(self, conn):
        self._conn = conn
        self._types: Dict[str, oracledb.DbObjectType] = {}

    @classmethod
    async def open(cls, config: DatabaseConfig) -> "RecordConnection":
        """
        Open a connection.

        Args:
            config: Database configuration

        Returns:
            RecordConnection instance

        Raises:
            ConfigError: If credentials are missing
            DatabaseConnectionError: If the connection fails
        """
        params = config.connect_params()
        logger.info(f"Connecting to Oracle: {config.user or '<external>'}@{config.dsn}")
        try:
            conn = oracledb.connect(**params)
        except oracledb.Error as e:
            logger.error(f"Connection failed: {e}")
            raise DatabaseConnectionError.from_driver("Failed to connect", e) from e

        logger.info("Connected")
        return cls(conn)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def close(self) -> None:
        """Close the connection. Further calls do nothing."""
        if self._conn is None:
            return

        conn = self._conn
        self._conn = None
        try:
            conn.close()
            logger.info("Connection closed")
        except oracledb.Error as e:
            raise DatabaseConnectionError.from_driver("Failed to close connection", e) from e

    async def get_type(self, rec_type: RecordTypeRef) -> oracledb.DbObjectType:
        """
        Resolve a record type reference to its descriptor.

        Args:
            rec_type: Descriptor (returned as is) or qualified type name

        Returns:
            DbObjectType

        Raises:
            RecordTypeError: If the type does not exist
        """
        if not isinstance(rec_type, str):
            return rec_type

        name = rec_type.upper()
        if name not in self._types:
            try:
                self._types[name] = self._connection().gettype(name)
            except oracledb.Error as e:
                raise RecordTypeError.from_driver(f"Record type {name} lookup failed", e) from e
            logger.debug(f"Loaded record type {name}")
        return self._types[name]

    async def execute(
        self,
        sql: str,
        binds: Optional[Mapping[str, Any]] = None,
        commit: bool = False
    ) -> Dict[str, Any]:
        """
        Execute a statement or PL/SQL call.

        Args:
            sql: Statement with named parameters (:param_name)
            binds: Parameter name to value or RecordBind
            commit: Whether to commit afterwards

        Returns:
            Dictionary with the OUT/INOUT bind values

        Raises:
            QueryError: If execution fails
            RecordTypeError: If a record type or field is invalid
        """
        conn = self._connection()
        cursor = conn.cursor()
        try:
            bind_params = {}
            out_vars = {}
            for key, value in (binds or {}).items():
                if not isinstance(value, RecordBind):
                    bind_params[key] = value
                    continue

                rec_type = await self.get_type(value.type)
                record = self._to_record(rec_type, value.value)
                if value.is_out:
                    # Variable receives the value written by the procedure
                    out_vars[key] = cursor.var(rec_type)
                    if record is not None:
                        out_vars[key].setvalue(0, record)
                    bind_params[key] = out_vars[key]
                else:
                    bind_params[key] = record

            logger.debug(f"SQL: {sql.strip()}")
            logger.debug(f"Binds: {sorted(bind_params)}")
            try:
                cursor.execute(sql, bind_params)
                if commit:
                    conn.commit()
            except oracledb.Error as e:
                logger.error(f"Execution failed: {e}")
                raise QueryError.from_driver("Execution failed", e) from e

            return {key: var.getvalue() for key, var in out_vars.items()}
        finally:
            cursor.close()

    async def execute_many(
        self,
        sql: str,
        rows: List[Mapping[str, Any]],
        bind_defs: Mapping[str, RecordBind],
        commit: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Execute a statement once per row in a single round trip.

        OUT binds only need a definition in bind_defs, not a value in
        each row.

        Args:
            sql: Statement with named parameters
            rows: Parameter dictionaries, one per execution
            bind_defs: Record type and direction per record parameter
            commit: Whether to commit afterwards

        Returns:
            One dictionary of OUT/INOUT values per row, in row order

        Raises:
            QueryError: If execution fails
            RecordTypeError: If a record type or field is invalid
        """
        if not rows:
            return []

        conn = self._connection()
        cursor = conn.cursor()
        try:
            types = {}
            sizes = {}
            out_vars = {}
            for key, bind_def in bind_defs.items():
                types[key] = await self.get_type(bind_def.type)
                if bind_def.is_out:
                    out_vars[key] = cursor.var(types[key], arraysize=len(rows))
                    sizes[key] = out_vars[key]
                else:
                    sizes[key] = types[key]

            params = []
            for i, row in enumerate(rows):
                row_params = {}
                for key, value in row.items():
                    if key in out_vars:
                        if value is not None:
                            out_vars[key].setvalue(i, self._to_record(types[key], value))
                    elif key in types:
                        row_params[key] = self._to_record(types[key], value)
                    else:
                        row_params[key] = value
                params.append(row_params)

            logger.debug(f"SQL: {sql.strip()} ({len(rows)} rows)")
            try:
                cursor.setinputsizes(**sizes)
                cursor.executemany(sql, params)
                if commit:
                    conn.commit()
            except oracledb.Error as e:
                logger.error(f"Batch execution failed: {e}")
                raise QueryError.from_driver("Batch execution failed", e) from e

            return [
                {key: var.getvalue(i) for key, var in out_vars.items()}
                for i in range(len(rows))
            ]
        finally:
            cursor.close()

    def _connection(self):
        if self._conn is None:
            raise DatabaseConnectionError("Connection is closed")
        return self._conn

    @staticmethod
    def _to_record(rec_type: oracledb.DbObjectType, value: Any) -> Any:
        """Convert a mapping to a record instance of rec_type; DbObjects pass through."""
        if isinstance(value, Mapping):
            return make_record(rec_type, value)
        return value
