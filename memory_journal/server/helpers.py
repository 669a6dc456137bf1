from flask import request

import memory_journal.helpers.config as cfg
from memory_journal.helpers.general import clamp, to_finite_float
from memory_journal.helpers.playlist import safe_parse_playlist, sanitize_playlist

MEMORY_FIELDS = ("title", "content", "emotion", "memory_date", "music_playlist")


def memory_payload() -> dict:
    """
    Collect memory fields from a multipart form or a JSON body.
    Empty strings are treated as missing.
    """
    if request.form or request.files:
        source = request.form
    else:
        source = request.get_json(silent=True) or {}

    payload = {}
    for field in MEMORY_FIELDS:
        value = source.get(field)
        if isinstance(value, str):
            value = value.strip() if field != "content" else value
        if value is None or value == "":
            continue
        payload[field] = value
    return payload


def uploaded_image():
    file = request.files.get("image")
    if file is None or not file.filename:
        return None
    return file


def normalize_volume(raw_value) -> float:
    """
    Clamp a requested volume to [0, 1]; non-numeric input becomes the default volume.
    """
    volume = to_finite_float(raw_value, None)
    if volume is None:
        return cfg.DEFAULT_VOLUME
    return clamp(volume, 0.0, 1.0)


def normalize_request_playlist(raw_value, available: set, fallback=None) -> list[str]:
    return sanitize_playlist(safe_parse_playlist(raw_value, fallback or []), available)
