"""
PostgreSQL storage for conversation messages.
"""

from .postgres_store import MESSAGES_SCHEMA, PostgresMessageStore
from .utils import build_insert_query, record_to_dict, record_to_row, records_to_rows

__all__ = [
    "MESSAGES_SCHEMA",
    "PostgresMessageStore",
    "build_insert_query",
    "record_to_dict",
    "record_to_row",
    "records_to_rows",
]
