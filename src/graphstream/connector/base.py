import logging
import threading
from abc import abstractmethod

from graphstream.support.events import EventSource

logger = logging.getLogger(__name__)


class ConnectorError(Exception):
    """ Indicates an error condition with a connection. """


class ConnectError(ConnectorError):
    """ The connection could not be established: bad address, failed handshake or authentication. """


class TrustStoreError(ConnectError):
    """ The trust store needed to verify a secure endpoint could not be provisioned. """


class ConnectionNotConnectedError(ConnectorError):
    """ Indicates a connection is in the disconnected state when a connection is required. """


class StreamError(ConnectorError):
    """ Reading the stream failed, either in the transport or in the stream reader. """


class CloseError(ConnectorError):
    """ A resource could not be released while closing. """


class ConnectorEvent:
    """ base class for connector events. """
    def __init__(self, connector):
        self.connector = connector

    def __eq__(self, other):
        return type(other) is type(self) and other.connector is self.connector

    def __hash__(self):
        return hash((type(self), id(self.connector)))


class ConnectorConnectedEvent(ConnectorEvent):
    """ The connector was connected. """


class ConnectorDisconnectedEvent(ConnectorEvent):
    """ The connector was disconnected. """


class Connector:
    """ A connector describes an endpoint to which a conduit can be established. """

    def __init__(self):
        self.events = EventSource()

    @property
    @abstractmethod
    def endpoint(self):
        """ the endpoint that this connector reaches out to """
        raise NotImplementedError

    @property
    @abstractmethod
    def connected(self) -> bool:
        """
        Determines if this connector is connected to its underlying resource.
        :return: True if this connector is connected to it's underlying resource. False otherwise.
        :rtype: bool
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def conduit(self):
        """
        Retrieves the conduit for this connection.
        If the connection is not connected, raises ConnectionNotConnectedError
        """
        raise NotImplementedError

    @abstractmethod
    def connect(self):
        """
        Connects this connector to the underlying resource.
        If the connection is already connected, this method returns silently.
        Raises ConnectError if the connection cannot be established.
        """
        raise NotImplementedError

    @abstractmethod
    def disconnect(self):
        """
        Releases the conduit. Safe to call from any thread and more than once.
        Raises CloseError if a resource could not be released.
        """
        raise NotImplementedError


class AbstractConnector(Connector):
    """ Manages the connection cycle to an endpoint.
        Subclasses implement _connect() to open the conduit.
    """

    def __init__(self):
        super().__init__()
        self._conduit = None
        self._lock = threading.RLock()

    @property
    def connected(self):
        conduit = self._conduit
        return conduit is not None and conduit.open

    def connect(self):
        with self._lock:
            if self._conduit is not None:
                return
            self._conduit = self._connect()
        self.events.fire(ConnectorConnectedEvent(self))

    def disconnect(self):
        with self._lock:
            conduit = self._conduit
            if conduit is None:
                return
            self._conduit = None
            try:
                self._disconnect()
                conduit.close()
            finally:
                self.events.fire(ConnectorDisconnectedEvent(self))

    @abstractmethod
    def _connect(self):
        """ Template method for subclasses to perform the connection.
            If connection is not possible, ConnectError should be raised.
        """
        raise NotImplementedError

    def _disconnect(self):
        """ perform any actions needed on disconnection.
        The base class takes care of closing the conduit, which happens
        after this method has been called.
        """
        pass

    @property
    def conduit(self):
        """
        Retrieves the conduit for this connection.
        raises ConnectionNotConnectedError if not connected
        """
        conduit = self._conduit
        if conduit is None:
            raise ConnectionNotConnectedError("%s is not connected" % (self.endpoint,))
        return conduit
