import logging
import threading

from wordstore import flush_store

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL = 120


class PersistenceWorker:
    """
    Background thread writing the word store to its override files.

    Wakes every `interval` seconds; when the store has been edited since
    the last flush, both sets are written out. A failed write is logged
    and the store is marked dirty again so the next cycle retries.
    Conversation handling never waits on this thread.
    """

    def __init__(self, store, words_dir, interval=DEFAULT_FLUSH_INTERVAL):
        self.store = store
        self.words_dir = words_dir
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None

    def flush_if_dirty(self) -> bool:
        """Run one flush cycle. Returns True if the lists were written."""
        if not self.store.take_dirty():
            return False

        logger.info("Updating word lists in %s", self.words_dir)
        try:
            flush_store(self.store, self.words_dir)
        except Exception:
            logger.exception("Failed to write word lists, retrying next cycle")
            self.store.mark_dirty()
            return False
        return True

    def run(self):
        """Main flush loop."""
        logger.info("Persistence worker started (interval %ss)", self.interval)

        while not self._stop.is_set():
            self.flush_if_dirty()
            self._stop.wait(self.interval)

        # Edits made since the last cycle
        self.flush_if_dirty()
        logger.info("Persistence worker stopped")

    def start(self):
        if self._thread is not None:
            raise RuntimeError("persistence worker already started")
        self._thread = threading.Thread(target=self.run, name="persistence-worker")
        self._thread.start()

    def stop(self, timeout=None):
        """Signal shutdown and wait for the loop to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
