"""
==========================
Player Module
==========================

This module provides the desktop side of the journal: the cooperative scheduler that stands in for
the browser's frame loop, the audio controller that owns the single audio output, the intro
sequencer with its procedural scene, and the journal glue that plays a memory's soundtrack while it
is open.

Features:
- `scheduler`: timers, repeating timers and frame callbacks on a virtual clock.
- `audio`: session state, output backends (pygame, silent), chime synthesis, controller.
- `intro`: intro state machine, procedural scene, cursor decorations, view hooks.
- `render`: renderer interface, recording renderer, Pillow renderer.
- `journal`: memory viewing/editing wired to the audio controller.
- `preview`: renders the intro to PNG frames.

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""
