"""Allow running as python -m plsql_record."""

from plsql_record.demo import main

main()
