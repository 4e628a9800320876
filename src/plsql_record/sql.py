"""
SQL used by the record binding example.

MYPROC copies its input record to the output and doubles POS.
"""

RECORD_TYPE_NAME = "RECTEST.RECTYPE"

CREATE_PACKAGE_SPEC = """
CREATE OR REPLACE PACKAGE rectest AS
  TYPE rectype IS RECORD (name VARCHAR2(40), pos NUMBER);
  PROCEDURE myproc (p_in IN rectype, p_out OUT rectype);
END rectest;"""

CREATE_PACKAGE_BODY = """
CREATE OR REPLACE PACKAGE BODY rectest AS
  PROCEDURE myproc (p_in IN rectype, p_out OUT rectype) AS
  BEGIN
    p_out := p_in;
    p_out.pos := p_out.pos * 2;
  END;
END rectest;"""

SETUP_STATEMENTS = [CREATE_PACKAGE_SPEC, CREATE_PACKAGE_BODY]

CALL_MYPROC = "CALL rectest.myproc(:inbv, :outbv)"
