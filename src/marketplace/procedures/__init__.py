"""Procedure gateway factory.

Provides get_procedures() / set_procedures() to swap implementations:
- FakeProcedures for development and testing
- PostgresProcedures for a real database (PROCEDURES_ADAPTER=postgres)
"""

import os

from marketplace.procedures.port import DriverLocation, ProcedureError, ProcedureGateway

_current_procedures: ProcedureGateway | None = None


def get_procedures() -> ProcedureGateway:
    """Return the configured procedure gateway (singleton).

    Uses FakeProcedures by default. Set PROCEDURES_ADAPTER=postgres together
    with DATABASE_URL to call the real stored procedures.
    """
    global _current_procedures
    if _current_procedures is None:
        adapter = os.environ.get("PROCEDURES_ADAPTER", "fake")
        if adapter == "fake":
            from marketplace.procedures.fake_adapter import FakeProcedures

            _current_procedures = FakeProcedures()
        elif adapter == "postgres":
            from marketplace.procedures.postgres_adapter import PostgresProcedures

            database_url = os.environ.get("DATABASE_URL")
            if not database_url:
                raise ValueError("DATABASE_URL must be set to use the postgres procedures adapter")
            _current_procedures = PostgresProcedures(database_url)
        else:
            raise ValueError(f"Unknown procedures adapter: {adapter}")
    return _current_procedures


def set_procedures(procedures: ProcedureGateway) -> None:
    """Override the active procedure gateway (useful for tests)."""
    global _current_procedures
    _current_procedures = procedures


def reset_procedures() -> None:
    """Reset the procedure gateway singleton (useful for testing)."""
    global _current_procedures
    _current_procedures = None


__all__ = [
    "DriverLocation",
    "ProcedureError",
    "ProcedureGateway",
    "get_procedures",
    "reset_procedures",
    "set_procedures",
]
