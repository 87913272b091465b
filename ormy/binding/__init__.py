"""Functionality related to binding parameters to SQL templates and mapping results onto records."""

from ormy.binding.fieldmaps import column
from ormy.binding.query import Fetch, Ormy, Query

__all__ = ["Fetch", "Ormy", "Query", "column", "errors"]
