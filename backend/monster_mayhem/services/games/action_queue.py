import queue
import threading
from contextlib import contextmanager


class ActionSerializer:
    """Single-worker FIFO queue for every game-state mutation.

    - Tasks from all sessions share one queue and one lock, so two actions
      never touch game state at the same time, whichever session they target
    - Each task runs to completion inside an app context before the next
      one is dequeued
    - Join/leave/disconnect handlers take the same lock via ``exclusive()``
    - In TESTING mode tasks run inline unless ENABLE_ACTION_WORKER_IN_TESTS
    """

    def __init__(self, app=None):
        self.app = None
        self.inline = False
        self._tasks = queue.Queue()
        self._lock = threading.Lock()
        self._start_lock = threading.Lock()
        self._worker_started = False
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self.inline = bool(app.config.get('TESTING')) and not app.config.get('ENABLE_ACTION_WORKER_IN_TESTS')
        app.extensions['monster_mayhem.serializer'] = self

    @contextmanager
    def exclusive(self):
        with self._lock:
            yield

    def submit(self, fn, *args, **kwargs) -> None:
        if self.inline:
            self._run(fn, args, kwargs)
            return
        self._tasks.put((fn, args, kwargs))
        self._ensure_worker()

    def wait_idle(self) -> None:
        """Block until every submitted task has finished."""
        self._tasks.join()

    @property
    def pending(self) -> int:
        return self._tasks.qsize()

    def _ensure_worker(self) -> None:
        with self._start_lock:
            if self._worker_started:
                return
            self._worker_started = True
        from monster_mayhem import socketio
        socketio.start_background_task(self._drain)
        self.app.logger.info("[queue] action worker started")

    def _drain(self) -> None:
        while True:
            fn, args, kwargs = self._tasks.get()
            try:
                self._run(fn, args, kwargs)
            finally:
                self._tasks.task_done()

    def _run(self, fn, args, kwargs) -> None:
        with self._lock, self.app.app_context():
            try:
                fn(*args, **kwargs)
            except Exception:
                # keep the worker alive for the next action
                self.app.logger.exception(f"[queue] task {getattr(fn, '__name__', fn)} failed")
