import logging
import threading
import time

logger = logging.getLogger(__name__)


class BackgroundTask:
    """ Runs a function once on a background thread.
        Exceptions are logged and posted to exception_handler, so they never escape the thread.
    """

    def __init__(self, fn=None, args=(), name=None, daemon=True, log=logger):
        """
        :param fn the function to run
        :param args arguments to pass to fn
        :param name the name given to the thread
        """
        self.fn = fn
        self.args = args
        self.name = name
        self.daemon = daemon
        self.background_thread = None
        self.finished = threading.Event()
        self.logger = log
        self._lock = threading.Lock()

    def start(self):
        """
        Starts the background thread.
        :return: True if this call started the thread, False if it had already been started.
        """
        with self._lock:
            if self.background_thread is not None:
                return False
            t = threading.Thread(target=self._run, name=self.name, daemon=self.daemon)
            self.background_thread = t
        t.start()
        return True

    def exception_handler(self, e):
        self.logger.exception(e)

    def _run(self):
        try:
            self._do(self.run)
        finally:
            self.finished.set()
        self.logger.debug("background thread %s exiting" % self.name)

    def _do(self, callme):
        """ runs a function and captures any exceptions """
        try:
            time.sleep(0)
            callme()
        except Exception as e:
            self.exception_handler(e)

    def run(self):
        self.fn(*self.args)

    def join(self, timeout=None):
        """
        Waits for the background thread to finish. Returns immediately when called
        from the background thread itself or when the thread was never started.
        :return: True if the task has finished.
        """
        thread = self.background_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        return self.finished.is_set()
