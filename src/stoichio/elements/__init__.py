from .base import ElementLookup
from .table import PeriodicTable, load_periodic_table, load_periodic_table_records

__all__ = ["ElementLookup", "PeriodicTable", "load_periodic_table", "load_periodic_table_records"]
