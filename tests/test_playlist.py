"""Tests for playlist parsing, sanitizing and editing helpers."""

import math

from memory_journal.helpers.playlist import (
    add_tracks,
    filter_existing_tracks,
    move_track,
    normalize_index,
    remove_tracks,
    safe_parse_playlist,
    sanitize_playlist,
)


class TestSafeParsePlaylist:
    def test_accepts_list(self):
        assert safe_parse_playlist([" a.mp3 ", "", 3, "b.mp3"]) == ["a.mp3", "b.mp3"]

    def test_accepts_json_string(self):
        assert safe_parse_playlist('["a.mp3", "b.mp3"]') == ["a.mp3", "b.mp3"]

    def test_malformed_json_falls_back(self):
        assert safe_parse_playlist("[not json", ["x.mp3"]) == ["x.mp3"]

    def test_non_list_json_falls_back(self):
        assert safe_parse_playlist('{"a": 1}', []) == []

    def test_missing_value_returns_copy_of_fallback(self):
        fallback = ["x.mp3"]
        result = safe_parse_playlist(None, fallback)
        assert result == fallback
        assert result is not fallback

    def test_empty_list_stays_empty(self):
        assert safe_parse_playlist([], ["x.mp3"]) == []


class TestSanitizePlaylist:
    def test_drops_names_missing_from_library(self):
        assert sanitize_playlist(["b.mp3", "c.mp3"], {"a.mp3", "b.mp3"}) == ["b.mp3"]

    def test_basename_trim_and_dedup(self):
        items = ["music/a.mp3", " a.mp3", "..\\b.mp3", "", "b.mp3"]
        assert sanitize_playlist(items) == ["a.mp3", "b.mp3"]

    def test_idempotent(self):
        available = {"a.mp3", "b.mp3", "c.mp3"}
        once = sanitize_playlist(["c.mp3", "x/a.mp3", "c.mp3", "z.mp3"], available)
        assert sanitize_playlist(once, available) == once
        assert once == ["c.mp3", "a.mp3"]

    def test_filter_existing_tracks(self):
        assert filter_existing_tracks(["a.mp3", "a.mp3", "gone.mp3"], {"a.mp3"}) == ["a.mp3"]
        assert filter_existing_tracks("a.mp3", {"a.mp3"}) == []


class TestNormalizeIndex:
    def test_wraps_negative(self):
        assert normalize_index(-1, 3) == 2

    def test_wraps_past_end(self):
        assert normalize_index(4, 3) == 1

    def test_truncates_floats(self):
        assert normalize_index(1.9, 3) == 1

    def test_empty_or_non_finite(self):
        assert normalize_index(5, 0) == 0
        assert normalize_index(math.nan, 3) == 0
        assert normalize_index("x", 3) == 0


class TestEditing:
    def test_add_dedups(self):
        playlist = ["a.mp3"]
        assert add_tracks(playlist, ["a.mp3", "b.mp3"]) == ["a.mp3", "b.mp3"]

    def test_remove_selected(self):
        assert remove_tracks(["a.mp3", "b.mp3", "c.mp3"], {"a.mp3", "c.mp3"}) == ["b.mp3"]

    def test_move_swaps_adjacent(self):
        playlist = ["a.mp3", "b.mp3", "c.mp3"]
        assert move_track(playlist, 1, -1) == 0
        assert playlist == ["b.mp3", "a.mp3", "c.mp3"]

    def test_move_is_noop_at_boundaries(self):
        playlist = ["a.mp3", "b.mp3"]
        assert move_track(playlist, 0, -1) == 0
        assert move_track(playlist, 1, 1) == 1
        assert playlist == ["a.mp3", "b.mp3"]
