"""Pure analysis package for the ledger dashboard.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
file or network I/O.
"""

from .aggregations import aggregate
from .layout import find_slot, resolve_absolute, resolve_proportional

__all__ = ["aggregate", "find_slot", "resolve_absolute", "resolve_proportional"]
