"""Dialect-aware atomic write helpers."""
from typing import Any

from sqlalchemy import Table
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

_UPSERT_DIALECTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


def insert_if_absent(
    db: DBSession,
    table: Table,
    values: dict[str, Any],
    index_elements: list[str],
) -> bool:
    """
    Insert a row unless one with the same unique key already exists.

    Returns True when this call inserted the row. The check and the write are
    a single statement, so concurrent callers cannot both win.
    """
    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(table).values(**values).on_conflict_do_nothing(
            index_elements=index_elements
        )
        return db.execute(stmt).rowcount == 1

    # Other backends: rely on the unique constraint inside a savepoint
    try:
        with db.begin_nested():
            db.execute(table.insert().values(**values))
    except IntegrityError:
        return False
    return True
