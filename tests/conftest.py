"""
Shared fixtures: an in-memory stand-in for an oracledb connection.

The fake database knows the RECTEST.RECTYPE record type and behaves
like RECTEST.MYPROC: the output record echoes NAME and doubles POS.
"""

import pytest
import oracledb

from plsql_record.config import DatabaseConfig


class FakeAttribute:
    def __init__(self, name):
        self.name = name


class FakeObjectType:
    """Stands in for oracledb.DbObjectType."""

    def __init__(self, schema, package_name, name, fields):
        self.schema = schema
        self.package_name = package_name
        self.name = name
        self.attributes = [FakeAttribute(f) for f in fields]

    def newobject(self):
        return FakeRecord(self)


class FakeRecord:
    """Stands in for oracledb.DbObject."""

    def __init__(self, obj_type):
        self.type = obj_type
        for attr in obj_type.attributes:
            setattr(self, attr.name, None)


class FakeVar:
    def __init__(self, obj_type, arraysize=1):
        self.type = obj_type
        self.values = [None] * arraysize

    def setvalue(self, pos, value):
        self.values[pos] = value

    def getvalue(self, pos=0):
        return self.values[pos]


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.input_sizes = {}
        self.closed = False

    def var(self, obj_type, arraysize=1):
        return FakeVar(obj_type, arraysize)

    def setinputsizes(self, **sizes):
        self.input_sizes = sizes

    def execute(self, sql, params=None):
        self.conn.record(sql)
        if sql.startswith("CALL"):
            self.conn.myproc(params["inbv"], params["outbv"], 0)

    def executemany(self, sql, rows):
        self.conn.record(sql)
        out_var = self.input_sizes["outbv"]
        for i, row in enumerate(rows):
            self.conn.myproc(row["inbv"], out_var, i)

    def close(self):
        self.closed = True


class FakeConnection:
    """Stands in for oracledb.Connection."""

    def __init__(self):
        self.rec_type = FakeObjectType("HR", "RECTEST", "RECTYPE", ["NAME", "POS"])
        self.executed = []
        self.batches = 0
        self.cursors = []
        self.fail_on = {}
        self.gettype_calls = 0
        self.gettype_error = None
        self.close_calls = 0
        self.close_error = None
        self.commits = 0

    def record(self, sql):
        self.executed.append(sql)
        for fragment, error in self.fail_on.items():
            if fragment in sql:
                raise error

    def myproc(self, in_value, out_var, pos):
        if isinstance(in_value, FakeVar):
            in_value = in_value.getvalue(pos)
        assert isinstance(in_value, FakeRecord), f"unexpected bind {in_value!r}"
        out = self.rec_type.newobject()
        out.NAME = in_value.NAME
        out.POS = in_value.POS * 2
        out_var.setvalue(pos, out)

    def gettype(self, name):
        self.gettype_calls += 1
        if self.gettype_error is not None:
            raise self.gettype_error
        if name != "RECTEST.RECTYPE":
            raise oracledb.DatabaseError(f"DPY-2035: invalid object type {name}")
        return self.rec_type

    def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def commit(self):
        self.commits += 1

    def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


@pytest.fixture
def fake_conn():
    return FakeConnection()


@pytest.fixture
def rec_type():
    """RECTEST.RECTYPE descriptor, a package record type."""
    return FakeConnection().rec_type


@pytest.fixture
def schema_type():
    """A schema-level object type with no package."""
    return FakeObjectType("HR", None, "ADDRESS_T", ["STREET"])


@pytest.fixture
def connect_calls(monkeypatch, fake_conn):
    """Route oracledb.connect() to fake_conn, recording its arguments."""
    calls = []

    def fake_connect(**kwargs):
        calls.append(kwargs)
        return fake_conn

    monkeypatch.setattr(oracledb, "connect", fake_connect)
    return calls


@pytest.fixture
def db_config():
    return DatabaseConfig(user="hr", password="welcome", dsn="localhost/orclpdb1")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "PLSQL_RECORD_CONFIG",
        "PLSQL_RECORD_USER",
        "PLSQL_RECORD_PASSWORD",
        "PLSQL_RECORD_DSN",
        "PLSQL_RECORD_EXTERNAL_AUTH",
        "PLSQL_RECORD_LIB_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
