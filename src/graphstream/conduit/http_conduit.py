import io
import logging
import socket
import threading

import httpx

from graphstream.conduit.base import Conduit
from graphstream.connector.base import CloseError

logger = logging.getLogger(__name__)


class ResponseStream(io.RawIOBase):
    """
    A readable byte stream over the body of a streamed http response.
    Reads block until data arrives from the server or the body ends.
    """

    def __init__(self, chunks):
        super().__init__()
        self._chunks = iter(chunks)
        self._pending = b''

    def readable(self):
        return True

    def _fill(self):
        """ fetches the next chunk if nothing is pending. Returns False at the end of the body. """
        while not self._pending:
            self._checkClosed()
            chunk = next(self._chunks, None)
            if chunk is None:
                return False
            self._pending = chunk
        return True

    def readinto(self, b):
        if not self._fill():
            return 0
        count = min(len(b), len(self._pending))
        b[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return count

    def readline(self, size=-1):
        line = bytearray()
        while size < 0 or len(line) < size:
            if not self._fill():
                break
            limit = len(self._pending) if size < 0 else min(len(self._pending), size - len(line))
            end = self._pending.find(b'\n', 0, limit)
            take = limit if end < 0 else end + 1
            line += self._pending[:take]
            self._pending = self._pending[take:]
            if end >= 0:
                break
        return bytes(line)

    def close(self):
        self._pending = b''
        super().close()


class HttpConduit(Conduit):
    """
    A read-only conduit over a streamed http response.

    close() may be called from any thread, including while another thread is blocked reading
    the input. The socket is shut down first so the blocked read returns.

    :param client   the httpx client that sent the request
    :param response the response, opened with stream=True and not yet read
    """

    def __init__(self, client: httpx.Client, response: httpx.Response):
        self.client = client
        self.response = response
        self._input = None
        self._output = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def target(self):
        return self.response

    @property
    def open(self) -> bool:
        return not self._closed

    @property
    def input(self) -> io.IOBase:
        with self._lock:
            if self._input is None:
                self._input = ResponseStream(self.response.iter_bytes())
            return self._input

    @property
    def output(self):
        return self._output

    def socket(self):
        """ the socket carrying the response, or None if the transport doesn't expose one """
        stream = self.response.extensions.get('network_stream')
        if stream is None:
            return None
        return stream.get_extra_info('socket')

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
            errors = []
            self._release(self._shutdown_socket, errors)
            if self._output is not None:
                self._release(self._output.close, errors)
            if self._input is not None:
                self._release(self._input.close, errors)
            self._release(self.response.close, errors)
            self._release(self.client.close, errors)
        if errors:
            raise CloseError("error closing %s" % self.response.url) from errors[0]

    def _shutdown_socket(self):
        sock = self.socket()
        if sock is not None:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                # the peer may have closed the socket already
                pass

    @staticmethod
    def _release(release, errors):
        try:
            release()
        except Exception as e:
            if errors:
                logger.debug("suppressed secondary close error: %s" % e)
            else:
                logger.warning("error releasing stream resource: %s" % e)
            errors.append(e)
