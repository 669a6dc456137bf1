import threading

from memory_journal.server import run_server


def run_server_thread(stop_event: threading.Event = None):
    """
    Start the journal HTTP server in a daemon thread so the main thread can run the tray icon.

    Args:
        stop_event (threading.Event, optional): threading event to stop the thread. Defaults to None.

    Returns:
        threading.Thread: thread object
    """

    thr = threading.Thread(target=run_server,
                           daemon=True, name="ServerThread")
    thr.start()
    return thr
