import subprocess
import os
import sys

from memory_journal.helpers.config import LOG_FOLDER

os.makedirs(LOG_FOLDER, exist_ok=True)  # Ensure the log folder exists

LOG_PATH_APP_CLI = os.path.join(LOG_FOLDER, "journal_cli.log")

base_dir = os.path.dirname(os.path.abspath(__file__))
app_path = os.path.join(base_dir, "main.py")


def venv_python():
    """
    Python interpreter of the project's virtualenv, falling back to the current one.
    """
    if os.name == "nt":
        candidate = os.path.join(base_dir, ".venv", "Scripts", "python.exe")
    else:
        candidate = os.path.join(base_dir, ".venv", "bin", "python")
    return candidate if os.path.exists(candidate) else sys.executable


def run_hidden(script_path, log_path):
    """
    Run a script in the background without opening a console window.

    Args:
        script_path (str): Path to the script to run.
        log_path (str): Path to the log file to capture output.
    """
    kwargs = {}
    if os.name == "nt":
        kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW
    else:
        kwargs["start_new_session"] = True
    with open(log_path, "w") as log_file:
        subprocess.Popen([venv_python(), script_path],
                         stdout=log_file,
                         stderr=subprocess.STDOUT,
                         **kwargs)


if __name__ == "__main__":
    run_hidden(app_path, LOG_PATH_APP_CLI)
    print("Journal launched in background.")
