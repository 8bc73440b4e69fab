# utils/async_runner.py
import asyncio
import concurrent.futures
import logging
import threading

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """One long-lived event loop in a daemon thread, shared by all requests.

    Flask views are synchronous; they hand coroutines to this loop so the
    verse caches, in-flight loads and the HTTP session all live on the same
    loop for the lifetime of the worker process.
    """

    def __init__(self, name='verse-loop'):
        self.name = name
        self._loop = None
        self._thread = None
        self._lock = threading.Lock()

    @property
    def started(self):
        return self._loop is not None

    def _ensure_started(self):
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(target=self._serve, args=(loop,), name=self.name, daemon=True)
                thread.start()
                self._loop, self._thread = loop, thread
                logger.info(f"Started background event loop '{self.name}'")
            return self._loop

    @staticmethod
    def _serve(loop):
        asyncio.set_event_loop(loop)
        loop.run_forever()

    def run(self, coro, timeout=None):
        """Run a coroutine on the loop and wait for its result.

        Raises concurrent.futures.TimeoutError (after cancelling the
        coroutine) when ``timeout`` elapses first.
        """
        loop = self._ensure_started()
        future = asyncio.run_coroutine_threadsafe(coro, loop)
        try:
            return future.result(timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            raise

    def stop(self):
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop, self._thread = None, None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()
