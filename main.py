"""
===========================
APP: Memory Journal
===========================

What it does:
- Stores text/image memories tagged with an emotion and an optional music playlist.
- Serves a small REST API (memories, music library, audio settings) over a local database.
- Plays the journal's background music and each memory's own soundtrack, with fades and resume.
- Runs the atmospheric intro sequence and can render it to PNG previews.
- Uses a system tray application for easy access and control.

Author: Sudharshan TK \n
License: GPLv3
"""
from memory_journal import start_app


if __name__ == "__main__":
    start_app()
