"""
==========================
Database - Main Database SQL Statements
==========================

This module contains SQL statements for initializing the journal database.
This also gives the pragma statements for performance and concurrency optimizations in SQLite.

Features:
- Provides SQL Statements for creating tables and indexes.
- Provides Performance and concurrency optimizations for SQLite.


Usage:
>>> from memory_journal.db import main_db_sql_statements
>>> SQL_CREATE_INDEX_MEMORIES_DATE  # Access the SQL statement for the timeline ordering index
>>> SQL_INIT_DB_STATEMENTS  # Access the list of SQL statements to initialize the main database

*Author: Sudharshan TK*\n
*Created: 2025-08-24*
"""

from memory_journal.db.sql.common import *

# Performance and concurrency tuning for Main Database
SQL_PRAGMA_TEMP_STORE_MEMORY = "PRAGMA temp_store=MEMORY;"

SQL_CREATE_INDEX_MEMORIES_DATE = "CREATE INDEX IF NOT EXISTS idx_memories_date ON memories(COALESCE(memory_date, created_at))"

SQL_INIT_DB_STATEMENTS = [
    SQL_PRAGMA_JOURNAL_MODE_WAL,
    SQL_PRAGMA_SYNCHRONOUS_NORMAL,
    SQL_PRAGMA_TEMP_STORE_MEMORY,

    SQL_CREATE_TABLE_MEMORIES,
    SQL_CREATE_TABLE_SETTINGS,

    SQL_CREATE_INDEX_MEMORIES_DATE,
]
