import logging

import httpx

from graphstream.conduit.http_conduit import HttpConduit
from graphstream.conduit.truststore import provision_trust_store, ssl_context
from graphstream.config.config import configure
from graphstream.connector.base import AbstractConnector, ConnectError
from graphstream.endpoint import StreamingEndpoint

logger = logging.getLogger(__name__)


class ConnectionSettings:
    """
    Transport settings for streaming connections.
    The defaults match graphstream.schema.cfg; use load() to read the configuration files.
    """

    def __init__(self, **kwargs):
        self.connect_timeout = 10.0
        self.write_timeout = 10.0
        self.trust_store_dir = '~/.graphstream'
        self.trust_store_file = 'cacerts.pem'
        self.user_agent = 'graphstream-connector-py'
        self.daemon_threads = True
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise TypeError("unknown setting '%s'" % k)
            setattr(self, k, v)

    @classmethod
    def load(cls, user_file=None):
        """ creates settings from the layered graphstream configuration files """
        return configure(cls(), 'graphstream.connection', 'graphstream', 'graphstream', user_file)

    def timeout(self) -> httpx.Timeout:
        # reads block for as long as the stream is open
        return httpx.Timeout(None, connect=self.connect_timeout, write=self.write_timeout,
                             pool=self.connect_timeout)


class HttpConnector(AbstractConnector):
    """
    A connector that opens a streamed http GET request to a streaming endpoint.

    :param endpoint     the endpoint to connect to
    :param settings     the transport settings
    :param transport    an optional httpx transport, used in place of the network
    """

    def __init__(self, endpoint: StreamingEndpoint, settings: ConnectionSettings=None, transport=None):
        super().__init__()
        self._endpoint = endpoint
        self.settings = settings or ConnectionSettings()
        self.transport = transport

    @property
    def endpoint(self):
        return self._endpoint

    def _connect(self) -> HttpConduit:
        url = self._validated_url()
        client = self._new_client(url)
        try:
            request = client.build_request('GET', url, headers=self._headers())
            response = client.send(request, stream=True)
        except httpx.HTTPError as e:
            client.close()
            logger.warning("error opening stream %s: %s" % (self._endpoint, e))
            raise ConnectError("unable to connect to %s: %s" % (self._endpoint, e)) from e

        if not response.is_success:
            response.close()
            client.close()
            raise ConnectError("%s responded with status %d %s" %
                               (self._endpoint, response.status_code, response.reason_phrase))

        logger.info("opened stream %s" % self._endpoint)
        return HttpConduit(client, response)

    def _validated_url(self) -> httpx.URL:
        try:
            url = self._endpoint.parsed_url()
        except httpx.InvalidURL as e:
            raise ConnectError("malformed url %s: %s" % (self._endpoint, e)) from e
        if url.scheme not in ('http', 'https') or not url.host:
            raise ConnectError("malformed url %s: expected an http or https address" % self._endpoint)
        return url

    def _headers(self):
        return {'User-Agent': self.settings.user_agent}

    def _auth(self):
        endpoint = self._endpoint
        if endpoint.has_credentials:
            return httpx.BasicAuth(endpoint.user, endpoint.password)
        return None

    def _verify(self, url):
        if url.scheme != 'https':
            return True
        path = provision_trust_store(self.settings.trust_store_dir, self.settings.trust_store_file)
        return ssl_context(path)

    def _new_client(self, url) -> httpx.Client:
        kwargs = dict(auth=self._auth(), timeout=self.settings.timeout(), follow_redirects=True,
                      verify=self._verify(url))
        if self.transport is not None:
            kwargs['transport'] = self.transport
        return httpx.Client(**kwargs)
