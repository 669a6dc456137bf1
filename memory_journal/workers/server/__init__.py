from memory_journal.workers.server.worker import run_server_thread
