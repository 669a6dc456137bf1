"""
==========================
Main Application Module
==========================

This module provides the main entry point for the application.
It starts the application by calling the `start_app` function.

Usage:
>>> from memory_journal import start_app
>>> start_app()

*Author: Sudharshan TK*
*Created: 2025-08-31*
"""


def start_app():
    # the tray stack (pystray, pygame) is only imported when the app actually starts
    from memory_journal.app import start_app as run
    run()
