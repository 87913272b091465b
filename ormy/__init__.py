"""Placeholder binding for SQL templates and mapping of query results onto dataclass records."""

from ormy.__version__ import __version__
from ormy.binding import Fetch, Ormy, Query, column

__all__ = ["Fetch", "Ormy", "Query", "__version__", "column"]
