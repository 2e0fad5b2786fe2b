"""
Provisions the CA bundle used to verify https streaming endpoints.

The bundle is copied once per process into a configuration directory. When the artifact is
already present it is reused as-is, so it can be replaced by a bundle with additional
(e.g. self-signed) certificates.
"""
import logging
import os
import shutil
import ssl
import tempfile
import threading

import certifi

from graphstream.connector.base import TrustStoreError

logger = logging.getLogger(__name__)

DEFAULT_TRUST_STORE_FILE = 'cacerts.pem'

_provision_lock = threading.Lock()


def trust_store_path(directory, filename=DEFAULT_TRUST_STORE_FILE):
    return os.path.join(os.path.expanduser(directory), filename)


def provision_trust_store(directory, filename=DEFAULT_TRUST_STORE_FILE, source=None):
    """
    Ensures the trust store exists in the given directory.
    :param directory: the configuration directory that holds the trust store
    :param filename: the name of the trust store file
    :param source: the CA bundle to copy. Defaults to the certifi bundle.
    :return: the path of the trust store
    :raises TrustStoreError: if the trust store cannot be created
    """
    path = trust_store_path(directory, filename)
    with _provision_lock:
        if os.path.isfile(path):
            return path
        source = source or certifi.where()
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=os.path.dirname(path), prefix='.' + filename)
            try:
                with os.fdopen(fd, 'wb') as out, open(source, 'rb') as src:
                    shutil.copyfileobj(src, out)
                os.replace(tmp, path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise TrustStoreError("unable to provision trust store %s: %s" % (path, e)) from e
        logger.info("provisioned trust store %s from %s" % (path, source))
        return path


def ssl_context(path):
    """ creates a client ssl context that trusts the certificates in the given bundle """
    try:
        return ssl.create_default_context(cafile=path)
    except (OSError, ssl.SSLError) as e:
        raise TrustStoreError("invalid trust store %s: %s" % (path, e)) from e
