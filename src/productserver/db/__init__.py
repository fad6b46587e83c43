"""
PostgreSQL access through psycopg2: the per-call connection gateway and
schema initialization.
"""

from .connection import Database
from .schema import SCHEMA_SQL, create_tables

__all__ = ["Database", "SCHEMA_SQL", "create_tables"]
