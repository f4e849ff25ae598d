"""Column helpers shared by the portfolio models.

Types are kept portable so the same models run on PostgreSQL in production
and on SQLite in the test suite.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import ARRAY

# Ordered list of strings: native ARRAY on PostgreSQL, JSON elsewhere.
StringList = JSON().with_variant(ARRAY(String), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
