import base64
import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock, patch

import httpx
from hamcrest import assert_that, calling, instance_of, is_, raises

from graphstream.conduit.http_conduit import HttpConduit
from graphstream.connector.base import ConnectError, ConnectorConnectedEvent, TrustStoreError
from graphstream.connector.http import ConnectionSettings, HttpConnector
from graphstream.endpoint import StreamingEndpoint


class ConnectionSettingsTest(unittest.TestCase):

    def test_defaults(self):
        sut = ConnectionSettings()
        assert_that(sut.connect_timeout, is_(10.0))
        assert_that(sut.trust_store_dir, is_('~/.graphstream'))
        assert_that(sut.trust_store_file, is_('cacerts.pem'))
        assert_that(sut.daemon_threads, is_(True))

    def test_overrides(self):
        sut = ConnectionSettings(connect_timeout=1.5, daemon_threads=False)
        assert_that(sut.connect_timeout, is_(1.5))
        assert_that(sut.daemon_threads, is_(False))

    def test_unknown_setting(self):
        assert_that(calling(ConnectionSettings).with_args(retries=3), raises(TypeError))

    def test_defaults_match_config_schema(self):
        with patch('platform.system', return_value='Linux'):
            loaded = ConnectionSettings.load(os.path.join(tempfile.gettempdir(), 'no-such-graphstream.cfg'))
        assert_that(vars(loaded), is_(vars(ConnectionSettings())))

    def test_timeout_has_no_read_limit(self):
        timeout = ConnectionSettings(connect_timeout=3.0).timeout()
        assert_that(timeout.connect, is_(3.0))
        assert_that(timeout.read, is_(None))


class HttpConnectorTest(unittest.TestCase):

    def setUp(self):
        self.requests = []
        self.status = 200
        self.dir = tempfile.mkdtemp()
        self.settings = ConnectionSettings(trust_store_dir=self.dir)

    def tearDown(self):
        shutil.rmtree(self.dir, ignore_errors=True)

    def handler(self, request):
        self.requests.append(request)
        return httpx.Response(self.status, content=b'{"an":{"A":{}}}\n')

    def connector(self, url, user=None, password=None):
        return HttpConnector(StreamingEndpoint(url, user, password), self.settings,
                             transport=httpx.MockTransport(self.handler))

    def test_endpoint(self):
        endpoint = StreamingEndpoint('http://localhost:8080/workspace0')
        assert_that(HttpConnector(endpoint).endpoint, is_(endpoint))

    def test_connect(self):
        sut = self.connector('http://localhost:8080/workspace0?operation=getGraph')
        events = Mock()
        sut.events.add(events)
        sut.connect()
        try:
            assert_that(sut.connected, is_(True))
            assert_that(sut.conduit, is_(instance_of(HttpConduit)))
            events.assert_called_once_with(ConnectorConnectedEvent(sut))
            request = self.requests[0]
            assert_that(request.method, is_('GET'))
            assert_that(str(request.url), is_('http://localhost:8080/workspace0?operation=getGraph'))
            assert_that('authorization' in request.headers, is_(False))
            assert_that(request.headers['user-agent'], is_('graphstream-connector-py'))
            assert_that(sut.conduit.input.readline(), is_(b'{"an":{"A":{}}}\n'))
        finally:
            sut.disconnect()
        assert_that(sut.connected, is_(False))

    def test_basic_auth_header(self):
        sut = self.connector('http://localhost/stream', 'gephi', 's3cret')
        sut.connect()
        sut.disconnect()
        expected = 'Basic ' + base64.b64encode(b'gephi:s3cret').decode('ascii')
        assert_that(self.requests[0].headers['authorization'], is_(expected))

    def test_error_status(self):
        self.status = 401
        sut = self.connector('http://localhost/stream')
        assert_that(calling(sut.connect), raises(ConnectError))
        assert_that(sut.connected, is_(False))

    def test_transport_error(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        sut = HttpConnector(StreamingEndpoint('http://localhost:1/'), self.settings,
                            transport=httpx.MockTransport(unreachable))
        assert_that(calling(sut.connect), raises(ConnectError))
        assert_that(sut.connected, is_(False))

    def test_malformed_urls(self):
        for url in ('ftp://localhost/stream', 'localhost/stream', 'http://', '::not a url::'):
            sut = self.connector(url)
            assert_that(calling(sut.connect), raises(ConnectError), url)
        assert_that(self.requests, is_([]))

    def test_https_provisions_trust_store(self):
        sut = self.connector('https://localhost/stream')
        sut.connect()
        sut.disconnect()
        assert_that(os.path.isfile(os.path.join(self.dir, 'cacerts.pem')), is_(True))

    def test_http_does_not_provision_trust_store(self):
        sut = self.connector('http://localhost/stream')
        sut.connect()
        sut.disconnect()
        assert_that(os.listdir(self.dir), is_([]))

    def test_trust_store_failure(self):
        sut = self.connector('https://localhost/stream')
        with patch('graphstream.connector.http.provision_trust_store',
                   side_effect=TrustStoreError("read-only")):
            assert_that(calling(sut.connect), raises(ConnectError))
        assert_that(self.requests, is_([]))

    def test_unreachable_host(self):
        """ connects to a closed local port over the network """
        sut = HttpConnector(StreamingEndpoint('http://127.0.0.1:9/'), ConnectionSettings(connect_timeout=2.0))
        assert_that(calling(sut.connect), raises(ConnectError))
