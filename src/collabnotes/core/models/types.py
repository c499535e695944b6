"""Custom SQLAlchemy types with cross-DB support (PostgreSQL and SQLite)."""

import json
import uuid
from typing import Iterable, List, Optional

from sqlalchemy import String, Text, TypeDecorator


def normalize_usernames(values: Optional[Iterable[str]]) -> List[str]:
    """Strip, drop blanks and duplicates, and sort a collection of usernames."""
    if not values:
        return []
    return sorted({str(v).strip() for v in values if v is not None and str(v).strip()})


class UsernameListType(TypeDecorator):
    """
    Store a set of usernames (a grant set) in a DB-friendly way:

    - On PostgreSQL: uses ARRAY(String(100))
    - On SQLite (and others): stores JSON text in a TEXT column

    Always hands back a sorted, de-duplicated List[str].
    """

    cache_ok = True
    impl = Text  # placeholder, real impl decided per-dialect

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import ARRAY

            return dialect.type_descriptor(ARRAY(String(100)))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Optional[Iterable[str]], dialect):
        values = normalize_usernames(value)
        if dialect.name == "postgresql":
            return values
        return json.dumps(values)

    def process_result_value(self, value, dialect) -> List[str]:
        if value is None:
            return []
        if dialect.name == "postgresql":
            return normalize_usernames(value)
        return normalize_usernames(json.loads(value))


class GUID(TypeDecorator):
    """
    Platform-independent GUID/UUID type.

    - Uses PostgreSQL UUID type when available
    - Falls back to CHAR(36) storing the hyphenated string on other DBs
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID as PG_UUID

            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
