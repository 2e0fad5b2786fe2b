"""
Stream readers decode the bytes arriving from a streaming connection. The decoding of the graph
payload itself belongs to concrete readers; this module defines the narrow interface the
connection drives, and a simple line-oriented reader.
"""
import logging
from abc import abstractmethod
from io import IOBase

from graphstream.report import Issue, Report

logger = logging.getLogger(__name__)


class StreamReaderStatusListener:
    """ Receives decode-level status from a StreamReader. """

    @abstractmethod
    def on_data_received(self):
        raise NotImplementedError

    @abstractmethod
    def on_error(self):
        raise NotImplementedError

    @abstractmethod
    def on_stream_closed(self):
        raise NotImplementedError


class StreamReader:
    """
    Consumes a byte stream and produces domain events. Status is reported to the listener
    set via set_status_listener().
    """

    def __init__(self, report: Report=None):
        self.report = report
        self.status_listener = None

    def set_status_listener(self, listener: StreamReaderStatusListener):
        self.status_listener = listener

    @abstractmethod
    def process_stream(self, stream: IOBase):
        """
        Reads the stream until it ends. Blocks the calling thread.
        Raises IOError for I/O failures and any other exception when the data is rejected.
        """
        raise NotImplementedError

    def _data_received(self):
        listener = self.status_listener
        if listener is not None:
            listener.on_data_received()

    def _error(self):
        listener = self.status_listener
        if listener is not None:
            listener.on_error()

    def _stream_closed(self):
        listener = self.status_listener
        if listener is not None:
            listener.on_stream_closed()


class LineStreamReader(StreamReader):
    """
    Reads newline delimited records and passes each non-blank line to a handler.

    A line that cannot be decoded, or that the handler rejects by raising ValueError, is skipped:
    the error is reported and reading continues. Any other exception stops the stream.

    :param handler  callable invoked with each decoded line (str)
    :param encoding the text encoding of the stream
    """

    def __init__(self, handler, report: Report=None, encoding='utf-8'):
        super().__init__(report)
        self.handler = handler
        self.encoding = encoding

    def process_stream(self, stream: IOBase):
        for raw in iter(stream.readline, b''):
            line = raw.strip()
            if not line:
                continue
            try:
                self.handler(line.decode(self.encoding))
            except ValueError as e:
                # includes UnicodeDecodeError
                logger.debug("rejected record %r: %s" % (line, e))
                if self.report is not None:
                    self.report.log_issue(Issue("invalid record: %r" % line, Issue.Level.WARNING, e))
                self._error()
                continue
            if self.report is not None:
                self.report.increment_event_counter()
            self._data_received()
        self._stream_closed()
