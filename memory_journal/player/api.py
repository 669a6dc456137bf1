"""
==========================
Player - Journal API Client
==========================

HTTP client for the journal server, used by the audio controller (track library, audio settings)
and the journal glue (memory CRUD). Every failure, whether a transport error or a non-2xx
response, surfaces as `ApiError`.

Usage:
>>> from memory_journal.player.api import JournalApi
>>> api = JournalApi("http://localhost:3000")
>>> api.get_music_files()
[{'name': 'a.mp3', 'url': '/music/a.mp3'}]
>>> api.put_audio_settings({"volume": 0.5})

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""

import json
from typing import Optional

import requests

import memory_journal.helpers.config as cfg
from memory_journal.logger import logger


class ApiError(Exception):
    """
    Raised when a journal API call fails.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class JournalApi:

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or cfg.API_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else cfg.API_TIMEOUT

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise ApiError(f"{path} -> {response.status_code}", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{path} returned invalid JSON", response.status_code) from e

    # Music library & settings

    def get_music_files(self) -> list[dict]:
        data = self._request("GET", "/api/music/files")
        files = data.get("files") if isinstance(data, dict) else None
        return files if isinstance(files, list) else []

    def get_audio_settings(self) -> dict:
        data = self._request("GET", "/api/audio/settings")
        return data if isinstance(data, dict) else {}

    def put_audio_settings(self, payload: dict) -> dict:
        logger.debug("Saving audio settings: %s", sorted(payload))
        return self._request("PUT", "/api/audio/settings", json=payload)

    # Memories

    def list_memories(self) -> list[dict]:
        data = self._request("GET", "/api/memories")
        return data if isinstance(data, list) else []

    def get_memory(self, memory_id: str) -> dict:
        return self._request("GET", f"/api/memories/{memory_id}")

    def _memory_form(self, fields: dict) -> dict:
        form = {}
        for key, value in fields.items():
            if value is None:
                continue
            form[key] = json.dumps(value) if key == "music_playlist" else value
        return form

    def create_memory(self, fields: dict, image_path: Optional[str] = None) -> dict:
        return self._send_memory("POST", "/api/memories", fields, image_path)

    def update_memory(self, memory_id: str, fields: dict, image_path: Optional[str] = None) -> dict:
        return self._send_memory("PUT", f"/api/memories/{memory_id}", fields, image_path)

    def _send_memory(self, method: str, path: str, fields: dict, image_path: Optional[str]):
        form = self._memory_form(fields)
        if not image_path:
            return self._request(method, path, data=form)
        with open(image_path, "rb") as image:
            return self._request(method, path, data=form, files={"image": image})

    def delete_memory(self, memory_id: str) -> dict:
        return self._request("DELETE", f"/api/memories/{memory_id}")
