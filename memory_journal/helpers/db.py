"""
==========================
Database Initialization and Management Module
==========================

This module provides functions to initialize and manage the journal database.
It ensures that the necessary database schema is created and provides the memory CRUD,
the settings key/value store and the global playlist normalization used by the server.


Features:
- Initializes the journal database with required tables and indexes.
- Adds columns introduced after the first release to older databases.
- Provides functions to execute SQL commands and fetch rows from the database.
- Provides memory CRUD and JSON-encoded settings.

Usage:
>>> from memory_journal.helpers.db import init_db, get_setting, set_setting, list_memories
>>> init_db()  # Initializes the journal database
>>> set_setting("global_volume", 0.4)
>>> get_setting("global_volume", 0.3)
0.4
>>> memories = list_memories()

*Author: Sudharshan TK*\n
*Created: 2025-08-24*
"""

import json
import sqlite3
import uuid

from memory_journal.logger import logger
import memory_journal.helpers.config as cfg
from memory_journal.helpers.music import get_music_files
from memory_journal.helpers.playlist import safe_parse_playlist, sanitize_playlist

from memory_journal.db import common_sql_statements, main_db_sql_statements


def db_conn() -> sqlite3.Connection:
    conn = sqlite3.connect(cfg.DB_PATH, timeout=30)
    conn.row_factory = sqlite3.Row
    return conn


def ensure_column(conn: sqlite3.Connection, table: str, column: str, definition: str) -> bool:
    """
    Add `column` to `table` when an older database does not have it yet.

    Returns:
        bool: True when the column was added.
    """
    columns = conn.execute(f"PRAGMA table_info({table})").fetchall()
    if any(col[1] == column for col in columns):
        return False
    conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")
    logger.info("Added column %s.%s", table, column)
    return True


def init_db():
    """
    Initialize the journal database by executing the SQL statements defined in
    SQL_INIT_DB_STATEMENTS, then add any column introduced after the first release.
    If the database file does not exist, it will be created automatically by SQLite.

    Returns:
        None
    """
    conn = sqlite3.connect(cfg.DB_PATH)
    cur = conn.cursor()

    for stmt in main_db_sql_statements.SQL_INIT_DB_STATEMENTS:
        try:
            cur.execute(stmt)
        except sqlite3.OperationalError as e:
            logger.error("Failed to execute statement: %s\nError: %s", stmt, e)

    for table, column, definition in common_sql_statements.SQL_LATE_COLUMNS:
        ensure_column(conn, table, column, definition)

    conn.commit()
    conn.close()


def db_exec(query: str, params=()):
    """
    Execute a SQL command on the journal database and commit it.

    Args:
        query (str): SQL command to execute.
        params (tuple, optional): Parameters to bind to the SQL command. Defaults to ().

    Returns:
        int: Number of rows changed.
    """
    conn = db_conn()
    try:
        cur = conn.execute(query, params)
        conn.commit()
        return cur.rowcount
    finally:
        conn.close()


def db_fetchall(query: str, params=()) -> list[dict]:
    """
    Fetch all rows matching the given query as plain dicts.

    Args:
        query (str): SQL query to execute.
        params (tuple, optional): Parameters to bind to the SQL query. Defaults to ().

    Returns:
        list[dict]: The rows fetched from the database.
    """
    conn = db_conn()
    try:
        return [dict(r) for r in conn.execute(query, params).fetchall()]
    finally:
        conn.close()


def db_fetchone(query: str, params=()):
    conn = db_conn()
    try:
        row = conn.execute(query, params).fetchone()
        return dict(row) if row else None
    finally:
        conn.close()


# =========================
# Settings
# =========================


def get_setting(key: str, fallback=None):
    """
    Read a JSON encoded setting. Missing keys and malformed values yield `fallback`.
    """
    row = db_fetchone(common_sql_statements.SQL_SELECT_SETTING, (key,))
    if not row:
        return fallback
    try:
        return json.loads(row["value"])
    except ValueError:
        logger.warning("Setting %s holds malformed JSON; using fallback", key)
        return fallback


def set_setting(key: str, value) -> None:
    db_exec(common_sql_statements.SQL_UPSERT_SETTING, (key, json.dumps(value)))


def get_global_playlist(files: list[dict] = None) -> list[str]:
    """
    Return the saved global playlist normalized against the music library.

    - An empty (or fully stale) playlist is replaced by the whole library and persisted.
    - When normalization dropped or reordered entries, the normalized list is persisted.

    Args:
        files (list[dict], optional): music library listing; read from disk when omitted.

    Returns:
        list[str]: Track names of the global playlist.
    """
    files = get_music_files() if files is None else files
    available = {item["name"] for item in files}
    saved = get_setting("global_playlist", [])
    normalized = sanitize_playlist(safe_parse_playlist(saved, []), available)

    if not normalized:
        default_playlist = [item["name"] for item in files]
        set_setting("global_playlist", default_playlist)
        return default_playlist

    if saved != normalized:
        set_setting("global_playlist", normalized)

    return normalized


# =========================
# Memories
# =========================


def normalize_memory_row(row):
    """
    Decode the JSON `music_playlist` column of a memory row.
    """
    if not row:
        return row
    return {**row, "music_playlist": safe_parse_playlist(row.get("music_playlist"), [])}


def list_memories() -> list[dict]:
    rows = db_fetchall(common_sql_statements.SQL_SELECT_MEMORIES)
    return [normalize_memory_row(r) for r in rows]


def get_memory(memory_id: str):
    return normalize_memory_row(db_fetchone(common_sql_statements.SQL_SELECT_MEMORY, (memory_id,)))


def get_memory_raw(memory_id: str):
    """Memory row exactly as stored (playlist still JSON encoded)."""
    return db_fetchone(common_sql_statements.SQL_SELECT_MEMORY, (memory_id,))


def insert_memory(title: str, content: str, emotion: str, image, music_playlist: list[str], memory_date: str) -> dict:
    memory_id = str(uuid.uuid4())
    db_exec(common_sql_statements.SQL_INSERT_MEMORY, (
        memory_id, title, content, emotion, image, json.dumps(music_playlist), memory_date))
    logger.info("Stored memory %s", memory_id)
    return get_memory(memory_id)


def update_memory(memory_id: str, title: str, content: str, emotion: str, image, music_playlist: list[str], memory_date) -> dict:
    db_exec(common_sql_statements.SQL_UPDATE_MEMORY, (
        title, content, emotion, image, json.dumps(music_playlist), memory_date, memory_id))
    logger.info("Updated memory %s", memory_id)
    return get_memory(memory_id)


def delete_memory(memory_id: str) -> bool:
    deleted = db_exec(common_sql_statements.SQL_DELETE_MEMORY, (memory_id,)) > 0
    if deleted:
        logger.info("Deleted memory %s", memory_id)
    return deleted
