"""
The streaming connection ties together a connector to a streaming endpoint, the stream reader
that decodes the bytes received, and the listeners interested in the connection status.

The connector is opened when the connection is created, so connection failures are raised to
the caller. The stream is read on a background thread started by start_async_processing().
Read failures are recorded in the report and surface to listeners as an error notification
followed by the closed notification.

Listeners receive each on_data_received()/on_error() in the order the reader reported them,
and on_connection_closed() exactly once, after all other notifications, whether the
stream ended, failed, or the connection was closed by the caller.
"""
import logging
import threading
from enum import Enum

from graphstream.connector.base import CloseError, Connector, StreamError
from graphstream.connector.http import ConnectionSettings, HttpConnector
from graphstream.endpoint import StreamingEndpoint
from graphstream.reader import StreamReader, StreamReaderStatusListener
from graphstream.report import Issue, Report
from graphstream.support.background import BackgroundTask
from graphstream.support.events import EventSource, ListenerError

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    CREATED = 0
    OPEN = 1
    PROCESSING = 2
    CLOSED = 3


class StatusEvent(Enum):
    """ The status notifications, valued by the listener method that receives them. """
    DATA_RECEIVED = 'on_data_received'
    ERROR = 'on_error'
    CLOSED = 'on_connection_closed'


class StatusListener:
    """ Observes a streaming connection. Override the notifications of interest. """

    def on_data_received(self, connection):
        pass

    def on_error(self, connection):
        pass

    def on_connection_closed(self, connection):
        pass


class StatusListeners(EventSource):
    """ The listeners registered with a connection. Fired with a StatusEvent and the connection. """

    def _notify(self, listener, event: StatusEvent, connection):
        getattr(listener, event.value)(connection)


class StatusBridge(StreamReaderStatusListener):
    """ Relays the reader status to the connection listeners. """

    def __init__(self, connection):
        self.connection = connection

    def on_data_received(self):
        self.connection._notify(StatusEvent.DATA_RECEIVED)

    def on_error(self):
        self.connection._notify(StatusEvent.ERROR)

    def on_stream_closed(self):
        # the connection is released and closed once process_stream() returns
        logger.debug("end of stream %s" % self.connection)


class StreamingConnection:
    """
    A connection to a streaming endpoint whose stream is decoded by a StreamReader.

    :param endpoint     the endpoint to connect to
    :param reader       the reader that decodes the stream
    :param report       the report shared with the reader. It is not owned by the connection.
    :param connector    the connector to the endpoint. By default an HttpConnector is created.
    :param settings     transport settings used to create the connector
    :raises ConnectError: when the endpoint cannot be connected
    """

    def __init__(self, endpoint: StreamingEndpoint, reader: StreamReader, report: Report=None,
                 connector: Connector=None, settings: ConnectionSettings=None):
        self._endpoint = endpoint
        self._reader = reader
        self._report = report if report is not None else Report(endpoint)
        self.settings = settings or ConnectionSettings()
        self._connector = connector or HttpConnector(endpoint, self.settings)
        self._listeners = StatusListeners(error_handler=self._listener_failed)
        self._state = ConnectionState.CREATED
        self._state_lock = threading.Lock()
        self._close_lock = threading.Lock()
        self._dispatch_lock = threading.RLock()
        self._close_requested = False
        self._closed_notified = False
        self._task = None

        self._connector.connect()
        self._transition(ConnectionState.OPEN)

    @property
    def endpoint(self) -> StreamingEndpoint:
        return self._endpoint

    @property
    def report(self) -> Report:
        return self._report

    def get_report(self) -> Report:
        return self._report

    @property
    def connector(self) -> Connector:
        return self._connector

    @property
    def state(self) -> ConnectionState:
        return self._state

    def is_closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    def add_listener(self, listener):
        self._listeners.add(listener)

    def remove_listener(self, listener):
        self._listeners.remove(listener)

    def start_async_processing(self):
        """
        Reads the stream on a background thread. Returns immediately.
        The stream is read once: further calls are ignored.
        """
        with self._state_lock:
            if self._state is not ConnectionState.OPEN:
                logger.warning("not starting %s: connection is %s" % (self, self._state.name.lower()))
                return
            self._state = ConnectionState.PROCESSING
            self._task = BackgroundTask(self.process, name="StreamingConnection[%s]" % self._endpoint.url,
                                        daemon=self.settings.daemon_threads)
        self._task.start()

    def join(self, timeout=None):
        """
        Waits for the background read loop to finish.
        :return: True when the read loop has finished, or was never started.
        """
        task = self._task
        return True if task is None else task.join(timeout)

    def process(self):
        """
        Reads the stream on the calling thread until it ends, fails or the connection is closed.
        Failures are recorded and never raised.
        """
        self._transition(ConnectionState.PROCESSING)
        try:
            stream = self._connector.conduit.input
            self._reader.set_status_listener(StatusBridge(self))
            self._reader.process_stream(stream)
        except Exception as e:
            self._stream_failed(e)
        finally:
            try:
                self._release()
            except CloseError as e:
                logger.info("error releasing %s: %s" % (self, e))
            self._closed()

    def close(self):
        """
        Closes the connection, unblocking a read in progress.
        Safe to call more than once and from any thread; every caller returns after the
        connection is released.
        :raises CloseError: to the first caller, when a resource could not be released
        """
        try:
            self._release()
        except CloseError as e:
            logger.warning("error closing %s: %s" % (self, e))
            raise
        finally:
            # outside the close lock: a listener being notified on another thread may itself call close()
            self._closed()

    def _release(self):
        """
        Disconnects the connector, once. Callers wait while another thread is disconnecting.
        :raises CloseError: to the caller that performed the disconnect
        """
        with self._close_lock:
            if self._close_requested:
                return
            self._close_requested = True
            try:
                self._connector.disconnect()
            except CloseError as e:
                self._record(Issue("error closing %s" % self._endpoint, Issue.Level.WARNING, e))
                raise

    def _stream_failed(self, e):
        if self._close_requested:
            logger.debug("stream %s ended by close: %s" % (self, e))
            return
        error = StreamError("error reading %s: %s" % (self._endpoint, e))
        error.__cause__ = e
        logger.info("error reading %s" % self, exc_info=e)
        self._record(Issue(str(error), Issue.Level.SEVERE, error))
        self._notify(StatusEvent.ERROR)

    def _transition(self, state: ConnectionState):
        """ moves forward to the given state. Nothing leaves the closed state. """
        with self._state_lock:
            if self._state is ConnectionState.CLOSED or state.value < self._state.value:
                return False
            self._state = state
            return True

    def _notify(self, event: StatusEvent):
        with self._dispatch_lock:
            if self._closed_notified:
                logger.debug("dropped %s from %s after close" % (event.name, self))
                return
            self._listeners.fire(event, self)

    def _closed(self):
        """ marks the connection closed and notifies the listeners, once. """
        self._transition(ConnectionState.CLOSED)
        with self._dispatch_lock:
            if self._closed_notified:
                return
            self._closed_notified = True
            logger.info("closed %s" % self)
            self._listeners.fire(StatusEvent.CLOSED, self)

    def _listener_failed(self, error: ListenerError):
        self._record(Issue("status listener failed: %s" % error.cause, Issue.Level.WARNING, error))

    def _record(self, issue):
        self._report.log_issue(issue)

    def __repr__(self):
        return "StreamingConnection[%s]" % self._endpoint.url
