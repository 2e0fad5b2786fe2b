import logging
import threading

logger = logging.getLogger(__name__)


class ListenerError(Exception):
    """ A handler raised an exception while being notified. """

    def __init__(self, handler, cause):
        super().__init__("listener %r failed: %s" % (handler, cause))
        self.handler = handler
        self.cause = cause


class EventSource(object):
    """
    A thread-safe set of handlers.

    Handlers may be added and removed from any thread, including while a fire() is in progress
    on another thread. Each fire() delivers to the handlers registered when it started.
    A handler that raises does not stop delivery to the others - the failure is logged and
    passed to error_handler as a ListenerError.
    """

    def __init__(self, error_handler=None, log=logger):
        self._handlers = []
        self._lock = threading.RLock()
        self.error_handler = error_handler
        self.logger = log

    def __len__(self):
        with self._lock:
            return len(self._handlers)

    def add(self, handler):
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return self

    def remove(self, handler):
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return self

    def handlers(self):
        with self._lock:
            return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        self._fire(*args, **kwargs)

    def _fire(self, *args, **kwargs):
        for handler in self.handlers():
            if handler is None:
                continue
            try:
                self._notify(handler, *args, **kwargs)
            except Exception as e:
                self._handler_failed(handler, e)

    def _notify(self, handler, *args, **kwargs):
        """ template method that delivers an event to one handler """
        handler(*args, **kwargs)

    def _handler_failed(self, handler, e):
        self.logger.exception("event handler %r raised: %s" % (handler, e))
        error_handler = self.error_handler
        if error_handler is not None:
            try:
                error_handler(ListenerError(handler, e))
            except Exception:
                self.logger.exception("error handler failed")
