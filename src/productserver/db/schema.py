"""
=============================================================================
SCHEMA
=============================================================================

Creates the `products` table if it does not already exist. Safe to run on
every start.

=============================================================================
"""

import logging

import psycopg2

from .connection import Database


logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS products (
    id      SERIAL PRIMARY KEY,
    name    VARCHAR NOT NULL,
    price   INT NOT NULL
)
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL.

    Raises:
        psycopg2.Error: If the database is unreachable or rejects the DDL.
    """
    try:
        database.execute_script(SCHEMA_SQL)
    except psycopg2.Error as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise
    logger.info("Database schema initialized successfully.")
