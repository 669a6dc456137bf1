"""
==========================
Database - Common SQL Statements
==========================

This module provides the SQL statements used by the journal database: table definitions,
pragma statements for performance and concurrency, and the memory / settings queries.

Features:
- Gives SQL Statements for creating the memories and settings tables.
- Gives Performance and concurrency optimizations for SQLite.
- Gives the CRUD statements for memories and the upsert for settings.


Usage:
>>> from memory_journal.db import common_sql_statements
>>> SQL_CREATE_TABLE_MEMORIES  # Access the SQL statement for creating the memories table
>>> SQL_UPSERT_SETTING  # Access the SQL statement for writing a setting

*Author: Sudharshan TK*\n
*Created: 2025-08-24*
"""

# Common Performance and concurrency optimizations for SQLite database operations
SQL_PRAGMA_JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL;"
SQL_PRAGMA_SYNCHRONOUS_NORMAL = "PRAGMA synchronous=NORMAL;"

SQL_CREATE_TABLE_MEMORIES = """CREATE TABLE IF NOT EXISTS memories (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        emotion TEXT DEFAULT 'peaceful',
        image TEXT,
        music_playlist TEXT DEFAULT '[]', -- JSON list of track names
        memory_date DATETIME,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )"""

SQL_CREATE_TABLE_SETTINGS = """CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL -- JSON encoded value
    )"""

# Memories
SQL_SELECT_MEMORIES = "SELECT * FROM memories ORDER BY COALESCE(memory_date, created_at) DESC"
SQL_SELECT_MEMORY = "SELECT * FROM memories WHERE id = ?"
SQL_INSERT_MEMORY = """INSERT INTO memories (id, title, content, emotion, image, music_playlist, memory_date)
        VALUES (?, ?, ?, ?, ?, ?, ?)"""
SQL_UPDATE_MEMORY = """UPDATE memories
        SET title = ?, content = ?, emotion = ?, image = ?, music_playlist = ?, memory_date = ?,
            updated_at = CURRENT_TIMESTAMP
        WHERE id = ?"""
SQL_DELETE_MEMORY = "DELETE FROM memories WHERE id = ?"

# Settings
SQL_SELECT_SETTING = "SELECT value FROM settings WHERE key = ?"
SQL_UPSERT_SETTING = """INSERT INTO settings (key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value"""

# Columns added after the first release: (table, column, definition)
SQL_LATE_COLUMNS = [
    ("memories", "music_playlist", "TEXT DEFAULT '[]'"),
]
