"""
Database utility functions shared by the PostgreSQL store.
"""

from typing import Any, Dict, List

import asyncpg

from ..message_store import MessageRow


def record_to_dict(record: asyncpg.Record) -> Dict[str, Any]:
    """Convert an asyncpg Record to a dictionary keyed by column name."""
    return dict(record)


def record_to_row(record: asyncpg.Record) -> MessageRow:
    """
    Map a ``messages`` record onto a MessageRow.

    The owner lives in the ``uid`` column.
    """
    data = record_to_dict(record)
    return MessageRow(
        owner=data["uid"],
        role=data["role"],
        content=data["content"],
        created_at=data["created_at"],
        id=data.get("id"),
    )


def records_to_rows(records: List[asyncpg.Record]) -> List[MessageRow]:
    return [record_to_row(record) for record in records]


def build_insert_query(
    table: str,
    data: Dict[str, Any],
    returning: str = "*",
) -> tuple[str, List[Any]]:
    """
    Build INSERT query with parameterized values.

    Args:
        table: Table name
        data: Dictionary of column: value pairs
        returning: RETURNING clause (default: "*")

    Returns:
        Tuple of (query, values)

    Example:
        query, values = build_insert_query(
            "messages",
            {"uid": "u1", "role": "user", "content": "hello"}
        )
    """
    if not data:
        raise ValueError("No data provided")

    columns = list(data.keys())
    values = list(data.values())
    placeholders = [f"${i+1}" for i in range(len(values))]

    query = f"""
        INSERT INTO {table} ({', '.join(columns)})
        VALUES ({', '.join(placeholders)})
        RETURNING {returning}
    """

    return query, values
