"""
==========================
Server - Flask App
==========================

This module implements the Flask web application that serves the memory journal:
the memory CRUD API, the music library listing, the audio settings store and the public files
(index page, uploaded images, music tracks).

Features:
- `/api/memories`: List (GET) and create (POST, multipart or JSON) memories.
- `/api/memories/<id>`: Read (GET), update (PUT) and delete (DELETE) a memory.
- `/api/music/files`: Lists the tracks of the music library.
- `/api/audio/settings`: Reads (GET) and updates (PUT) the global playlist and volume.
- `/uploads/<file>`, `/music/<file>`: Serve uploaded images and music tracks.

Usage:
>>> from memory_journal.server import run_server
>>> run_server()

*Author: Sudharshan TK*\n
*Created: 2023-09-02*
"""

from memory_journal.server.server import APP, run_server
