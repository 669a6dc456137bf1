import os
import signal
import subprocess
import sys
import threading
import webbrowser
from concurrent.futures import ThreadPoolExecutor

from PIL import Image, ImageDraw
import pystray
from pystray import MenuItem as Item, Menu as TrayMenu

import memory_journal.helpers.config as cfg
from memory_journal.helpers.db import init_db
from memory_journal.helpers.general import ensure_dirs, journal_page_url, monotonic_ms
from memory_journal.logger import configure_logger, logger
from memory_journal.player.api import ApiError, JournalApi
from memory_journal.player.audio.controller import AudioController
from memory_journal.player.audio.pygame_output import PygameChime, create_audio_output
from memory_journal.player.events import POINTER_DOWN, GestureListeners
from memory_journal.player.intro.scene import IntroScene
from memory_journal.player.intro.sequencer import IntroSequencer
from memory_journal.player.intro.view import LoggingIntroView
from memory_journal.player.journal import JournalPlayer
from memory_journal.player.preview import render_intro_preview
from memory_journal.player.scheduler import Scheduler
from memory_journal.workers import FrameClockWorker, graceful_workers_shutdown, run_server_thread

# Give the HTTP server a moment before the first library fetch
INTRO_AUDIO_DELAY_MS = 800

# =========================
# Tray Icon
# =========================


def create_tray_image(size: int = 64):
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    c = size / 2
    draw.ellipse((2, 2, size - 2, size - 2), fill=(13, 29, 35, 255), outline=(214, 229, 234, 255), width=3)
    draw.ellipse((c - 10, c - 10, c + 10, c + 10), fill=(210, 233, 238, 255))
    for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
        draw.line((c + dx * 12, c + dy * 12, c + dx * 24, c + dy * 24), fill=(222, 236, 240, 255), width=2)
    return img


def open_path(path):
    path = os.path.abspath(path)
    try:
        if hasattr(os, "startfile"):
            os.startfile(path)
        elif sys.platform == "darwin":
            subprocess.Popen(["open", path])
        else:
            subprocess.Popen(["xdg-open", path])
    except OSError as e:
        logger.warning("Could not open %s: %s", path, e)


def open_logs(_icon=None, _item=None):
    open_path(cfg.LOG_FOLDER)


def open_root(_icon=None, _item=None):
    open_path(cfg.BASE_DIR)


class TrayPlayer:
    """
    The player objects of the tray app. Menu callbacks run on the tray thread, so every action
    is posted to the scheduler (frame clock thread) and counts as a user gesture first.
    """

    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler
        self.gestures = GestureListeners()
        self.api = JournalApi()
        self.output = create_audio_output(scheduler.now)
        self.chime = PygameChime()
        self.controller = AudioController(self.api, self.output, scheduler, self.gestures)
        self.journal = JournalPlayer(self.api, self.controller, scheduler)
        self.sequencer = IntroSequencer(scheduler, LoggingIntroView(), IntroScene(1280, 720), chime=self.chime.play)
        self.executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="PlayerIO")

    def start(self):
        self.scheduler.call_soon(self.sequencer.start)
        self.scheduler.call_later(INTRO_AUDIO_DELAY_MS, self.controller.start_intro_audio)

    def post(self, action):
        def run():
            self.gestures.dispatch(POINTER_DOWN)
            action()
        self.scheduler.call_soon(run)

    def menu_action(self, action):
        return lambda icon, item: self.post(action)

    def open_journal(self):
        self.sequencer.handle_click()
        url = journal_page_url()
        if url is None:
            logger.info("No journal front end installed in %s, use the tray menu instead", cfg.PUBLIC_DIR)
            return
        webbrowser.open(url)

    def replay_latest_memory(self):
        try:
            memories = self.journal.list_memories()
        except ApiError as e:
            logger.error("Failed to list memories: %s", e)
            return
        if not memories:
            logger.info("No memories to replay yet")
            return
        self.journal.request_view(memories[0]["id"], self.executor)

    def render_preview(self):
        thr = threading.Thread(target=render_intro_preview, daemon=True, name="PreviewThread")
        thr.start()

    def close(self):
        self.executor.shutdown(wait=False)
        self.output.close()


def run_tray_app():
    """
    Main function to run the tray application.
    Starts the journal server and the player frame clock, sets up signal handlers for graceful
    shutdown, and starts the tray icon.
    """
    ensure_dirs()

    configure_logger()

    init_db()

    stop_event = threading.Event()

    run_server_thread(stop_event=stop_event)
    logger.info("Server thread started on port %s", cfg.SERVER_PORT)

    # the frame clock ticks with monotonic time
    scheduler = Scheduler(start_ms=monotonic_ms())
    player = TrayPlayer(scheduler)

    # Start the frame clock driving the player
    frame_clock = FrameClockWorker(stop_event=stop_event, thread_name="FrameClockThread",
                                   scheduler=scheduler, on_frame=player.output.poll)
    frame_clock.start()
    player.start()

    workers = [frame_clock]
    closers = [player.close]
    icon = None

    def shutdown(*_args):
        graceful_workers_shutdown(icon, None, stop_event, workers, closers)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    menu = TrayMenu(
        Item("Open Journal", player.menu_action(player.open_journal), default=True),
        Item("Play / Pause", player.menu_action(player.controller.toggle_play_pause)),
        Item("Next Track", player.menu_action(player.controller.next_track)),
        Item("Previous Track", player.menu_action(player.controller.previous_track)),
        Item("Replay Latest Memory", player.menu_action(player.replay_latest_memory)),
        Item("Back to Journal Music", player.menu_action(player.journal.close_view)),
        Item("Render Intro Preview", lambda icon, item: player.render_preview()),
        Item("Open Folder", open_root),
        Item("Open Logs", open_logs),
        Item("Exit", lambda icon, item: graceful_workers_shutdown(
            icon, item, stop_event, workers, closers))
    )

    icon = pystray.Icon(cfg.APP_NAME, create_tray_image(), cfg.APP_NAME, menu)
    icon.run()


def start_app():
    """
    Entry point to start the tray application.
    Handles exceptions and logs fatal errors.
    """
    try:
        run_tray_app()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.exception("Fatal error in tray app: %s", e)
        raise
