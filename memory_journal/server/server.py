import logging

from flask_cors import CORS
from flask import Flask, jsonify, request, send_from_directory

import memory_journal.helpers.config as cfg
from memory_journal.helpers import db
from memory_journal.helpers.general import utc_iso_now
from memory_journal.helpers.music import get_music_files
from memory_journal.helpers.uploads import save_upload
from memory_journal.logger import configure_server_logger, logger
from memory_journal.server.helpers import memory_payload, uploaded_image, normalize_volume, normalize_request_playlist


APP = Flask(cfg.APP_NAME, static_folder=None)
CORS(APP)

NOT_FOUND_MESSAGE = "Memory not found"


def error_response(error: Exception, status: int = 500):
    logger.exception("Request failed: %s", error)
    return jsonify({"error": str(error)}), status


@APP.route('/')
def index():
    """
    Serve the main HTML page.
    """
    return send_from_directory(cfg.PUBLIC_DIR, "index.html")


@APP.route('/uploads/<path:filename>')
def uploads(filename):
    return send_from_directory(cfg.UPLOADS_DIR, filename)


@APP.route('/music/<path:filename>')
def music(filename):
    return send_from_directory(cfg.MUSIC_DIR, filename)


@APP.route('/api/memories', methods=['GET'])
def api_list_memories():
    """
    List all memories, newest first (memory_date, falling back to created_at).
    """
    try:
        return jsonify(db.list_memories())
    except Exception as e:
        return error_response(e)


@APP.route('/api/memories/<memory_id>', methods=['GET'])
def api_get_memory(memory_id):
    try:
        memory = db.get_memory(memory_id)
        if not memory:
            return jsonify({"error": NOT_FOUND_MESSAGE}), 404
        return jsonify(memory)
    except Exception as e:
        return error_response(e)


@APP.route('/api/memories', methods=['POST'])
def api_create_memory():
    """
    Create a memory from a multipart form (with an optional `image` file) or a JSON body.

    Parameters:
        title (str): Memory title (required).
        content (str): Markdown content (required).
        emotion (str): Emotion tag (default: peaceful).
        memory_date (str): ISO datetime (default: now).
        music_playlist (str | list): JSON list of track names; stale names are dropped.
    """
    try:
        payload = memory_payload()
        if not payload.get("title") or not payload.get("content"):
            return jsonify({"error": "title and content are required"}), 400

        image = uploaded_image()
        image_path = save_upload(image) if image else None
        available = {item["name"] for item in get_music_files()}
        playlist = normalize_request_playlist(payload.get("music_playlist"), available)

        memory = db.insert_memory(
            title=payload["title"],
            content=payload["content"],
            emotion=payload.get("emotion") or cfg.DEFAULT_EMOTION,
            image=image_path,
            music_playlist=playlist,
            memory_date=payload.get("memory_date") or utc_iso_now(),
        )
        return jsonify(memory), 201
    except Exception as e:
        return error_response(e)


@APP.route('/api/memories/<memory_id>', methods=['PUT'])
def api_update_memory(memory_id):
    """
    Update a memory. Fields that are missing keep their stored values; a missing
    playlist keeps the stored playlist (still re-validated against the library).
    """
    try:
        existing = db.get_memory_raw(memory_id)
        if not existing:
            return jsonify({"error": NOT_FOUND_MESSAGE}), 404

        payload = memory_payload()
        image = uploaded_image()
        image_path = save_upload(image) if image else existing["image"]
        available = {item["name"] for item in get_music_files()}
        stored_playlist = db.normalize_memory_row(existing)["music_playlist"]
        playlist = normalize_request_playlist(
            payload.get("music_playlist"), available, fallback=stored_playlist)

        memory = db.update_memory(
            memory_id,
            title=payload.get("title") or existing["title"],
            content=payload.get("content") or existing["content"],
            emotion=payload.get("emotion") or existing["emotion"],
            image=image_path,
            music_playlist=playlist,
            memory_date=payload.get("memory_date") or existing["memory_date"],
        )
        return jsonify(memory)
    except Exception as e:
        return error_response(e)


@APP.route('/api/memories/<memory_id>', methods=['DELETE'])
def api_delete_memory(memory_id):
    try:
        if not db.delete_memory(memory_id):
            return jsonify({"error": NOT_FOUND_MESSAGE}), 404
        return jsonify({"message": "Memory dissolved into the void"})
    except Exception as e:
        return error_response(e)


@APP.route('/api/music/files')
def api_music_files():
    try:
        return jsonify({"files": get_music_files()})
    except Exception as e:
        return error_response(e)


def audio_settings_response(files: list[dict]):
    return jsonify({
        "global_playlist": db.get_global_playlist(files),
        "volume": normalize_volume(db.get_setting("global_volume", cfg.DEFAULT_VOLUME)),
    })


@APP.route('/api/audio/settings', methods=['GET'])
def api_get_audio_settings():
    try:
        return audio_settings_response(get_music_files())
    except Exception as e:
        return error_response(e)


@APP.route('/api/audio/settings', methods=['PUT'])
def api_put_audio_settings():
    """
    Update audio settings. Both keys are optional.

    Parameters:
        global_playlist (list[str]): New global playlist; stale names are dropped.
        volume (float): New volume, clamped to [0, 1].
    """
    try:
        body = request.get_json(silent=True) or {}
        files = get_music_files()
        available = {item["name"] for item in files}

        if "global_playlist" in body:
            db.set_setting("global_playlist", normalize_request_playlist(
                body["global_playlist"], available))

        if "volume" in body:
            db.set_setting("global_volume", normalize_volume(body["volume"]))

        return audio_settings_response(files)
    except Exception as e:
        return error_response(e)


@APP.route('/<path:filename>', methods=['GET'])
def public_files(filename):
    return send_from_directory(cfg.PUBLIC_DIR, filename)


def run_server():
    """
    Run the journal HTTP server.
    Configures logging to integrate with the application's logger and starts the server on the configured port.
    """
    # Redirect Flask's internal logger to the server logger
    server_logger = configure_server_logger()
    APP.logger.handlers = server_logger.handlers
    APP.logger.setLevel(server_logger.level)

    # Replace Werkzeug's default handler with the server logger
    werkzeug_logger = logging.getLogger('werkzeug')
    werkzeug_logger.handlers = []
    werkzeug_logger.propagate = False

    for handler in server_logger.handlers:
        werkzeug_logger.addHandler(handler)

    werkzeug_logger.setLevel(logging.INFO)

    db.init_db()
    logger.info("Journal server listening on http://localhost:%s", cfg.SERVER_PORT)
    APP.run(port=cfg.SERVER_PORT, debug=False, use_reloader=False)
