import httpx


class StreamingEndpoint:
    """
    Describes a graph streaming source: the url to fetch the stream from, and optional
    credentials for basic authentication.

    The endpoint is immutable. When a user is given without a password, the empty password
    is used so the credentials can always be sent.
    """

    __slots__ = ('_url', '_user', '_password')

    def __init__(self, url, user=None, password=None):
        object.__setattr__(self, '_url', str(url))
        object.__setattr__(self, '_user', user)
        object.__setattr__(self, '_password', password if password is not None or not user else '')

    def __setattr__(self, key, value):
        raise AttributeError("StreamingEndpoint is immutable")

    @property
    def url(self) -> str:
        return self._url

    @property
    def user(self):
        return self._user

    @property
    def password(self):
        return self._password

    @property
    def has_credentials(self) -> bool:
        return bool(self._user)

    def parsed_url(self) -> httpx.URL:
        """ raises httpx.InvalidURL when the url cannot be parsed """
        return httpx.URL(self._url)

    @property
    def scheme(self) -> str:
        return self.parsed_url().scheme

    @property
    def host(self) -> str:
        return self.parsed_url().host

    @property
    def path(self) -> str:
        return self.parsed_url().path

    @property
    def secure(self) -> bool:
        return self.scheme == 'https'

    def _key(self):
        return self._url, self._user, self._password

    def __eq__(self, other):
        return isinstance(other, StreamingEndpoint) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        """
        >>> StreamingEndpoint('http://localhost:8080/workspace0', 'me', 'secret')
        StreamingEndpoint('http://localhost:8080/workspace0', user='me', password='***')
        """
        password = '***' if self._password else self._password
        return "StreamingEndpoint(%r, user=%r, password=%r)" % (self._url, self._user, password)

    def __str__(self):
        return self._url
