from abc import abstractmethod
from io import IOBase


class Conduit:
    """
    A conduit owns a live transport to an endpoint. It provides a file-like input stream,
    and for duplex transports, a file-like output stream.
    """

    @property
    @abstractmethod
    def target(self):
        """ the underlying transport resource """
        raise NotImplementedError

    @property
    @abstractmethod
    def input(self) -> IOBase:
        """ fetches the I/O stream that provides input.
            Callers can use the usual readXXX() methods. """
        raise NotImplementedError

    @property
    @abstractmethod
    def output(self) -> IOBase:
        """ fetches the I/O stream that provides output, or None when the transport is read-only. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ determines if this conduit is open. When open, the streams provided by
            input and output can be read from/written to."""
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """
        Releases the output stream, the input stream and then the transport.
        Closing a closed conduit does nothing.
        """
        raise NotImplementedError
