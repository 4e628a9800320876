"""
PL/SQL RECORD Binding Example

Creates the RECTEST package, whose MYPROC procedure takes and returns
a RECORD, then calls it with each of the supported ways of binding a
record:

1. Constructing a record object from the type descriptor
2. Binding field values together with the type descriptor
3. Binding field values together with the type name
4. Binding many records at once with execute_many()

Every returned record is printed to stdout.
"""

import asyncio
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import oracledb
import yaml

from plsql_record.client_lib import init_client_library
from plsql_record.config import DatabaseConfig
from plsql_record.connection import RecordConnection
from plsql_record.exceptions import ConfigError, QueryError
from plsql_record.records import BindDirection, RecordBind, make_record, record_to_dict
from plsql_record.sql import CALL_MYPROC, RECORD_TYPE_NAME, SETUP_STATEMENTS

logger = logging.getLogger("plsql_record.demo")

LOGGING_CONFIG = Path("config/logging.yaml")


async def create_package(conn: RecordConnection) -> None:
    """Create the RECTEST package. A failing statement does not stop the next one."""
    for stmt in SETUP_STATEMENTS:
        try:
            await conn.execute(stmt)
        except QueryError as e:
            logger.error(f"Package setup statement failed: {e}")


def _out_bind(rec_type: oracledb.DbObjectType) -> RecordBind:
    return RecordBind(rec_type, direction=BindDirection.OUT)


async def bind_constructed(conn: RecordConnection, rec_type: oracledb.DbObjectType) -> Dict[str, Any]:
    obj = make_record(rec_type, {"NAME": "Ship", "POS": 12})
    out = await conn.execute(CALL_MYPROC, {"inbv": obj, "outbv": _out_bind(rec_type)})
    return record_to_dict(out["outbv"])


async def bind_values(conn: RecordConnection, rec_type: oracledb.DbObjectType) -> Dict[str, Any]:
    binds = {
        "inbv": RecordBind(rec_type, {"NAME": "Plane", "POS": 34}),
        "outbv": _out_bind(rec_type),
    }
    out = await conn.execute(CALL_MYPROC, binds)
    return record_to_dict(out["outbv"])


async def bind_type_name(conn: RecordConnection, rec_type: oracledb.DbObjectType) -> Dict[str, Any]:
    # Input type given by name, resolved by the connection
    binds = {
        "inbv": RecordBind(RECORD_TYPE_NAME, {"NAME": "Car", "POS": 56}),
        "outbv": _out_bind(rec_type),
    }
    out = await conn.execute(CALL_MYPROC, binds)
    return record_to_dict(out["outbv"])


async def bind_many(conn: RecordConnection, rec_type: oracledb.DbObjectType) -> List[Dict[str, Any]]:
    rows = [
        {"inbv": {"NAME": "Train", "POS": 78}},
        {"inbv": {"NAME": "Bike", "POS": 83}},
    ]
    bind_defs = {
        "inbv": RecordBind(rec_type),
        "outbv": _out_bind(rec_type),
    }
    results = await conn.execute_many(CALL_MYPROC, rows, bind_defs)
    return [record_to_dict(r["outbv"]) for r in results]


async def run(config: DatabaseConfig) -> List[Dict[str, Any]]:
    """
    Run the example end to end.

    Errors are logged, never raised. The connection is closed on every
    path once it has been opened.

    Args:
        config: Database configuration

    Returns:
        The returned records printed before any error
    """
    conn: Optional[RecordConnection] = None
    printed: List[Dict[str, Any]] = []

    def show(record: Dict[str, Any]) -> None:
        print(record)
        printed.append(record)

    try:
        conn = await RecordConnection.open(config)

        await create_package(conn)

        rec_type = await conn.get_type(RECORD_TYPE_NAME)

        print("Using the constructor to create an object:")
        show(await bind_constructed(conn, rec_type))

        print("\nBinding the record values directly:")
        show(await bind_values(conn, rec_type))
        show(await bind_type_name(conn, rec_type))

        print("\nExample with executeMany():")
        for record in await bind_many(conn, rec_type):
            show(record)

    except Exception:
        logger.exception("Record binding example failed")
    finally:
        if conn is not None:
            try:
                await conn.close()
            except Exception:
                logger.exception("Error closing connection")

    return printed


def setup_logging(debug: bool = False) -> None:
    """Configure logging from config/logging.yaml, or basic stderr logging."""
    if LOGGING_CONFIG.exists():
        with open(LOGGING_CONFIG, "r") as f:
            logging.config.dictConfig(yaml.safe_load(f))
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("plsql_record").setLevel(logging.DEBUG)


@click.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Config file path (default: $PLSQL_RECORD_CONFIG or ~/.plsql_record/config.yaml)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(config_path: Optional[str], debug: bool) -> None:
    """
    Bind PL/SQL RECORD types with python-oracledb.

    \b
    Connection settings come from the config file or the environment:
      PLSQL_RECORD_USER, PLSQL_RECORD_PASSWORD, PLSQL_RECORD_DSN
    """
    setup_logging(debug)

    try:
        if config_path:
            config = DatabaseConfig.from_file(Path(config_path))
        else:
            config = DatabaseConfig.find_and_load()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    init_client_library(config.lib_dir)

    asyncio.run(run(config))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
