import logging


_logger = logging.getLogger(__name__)


class CertificateAuthority(object):
    """A Fabric CA as described by a connection profile.

    The HTTP connection options and the registrar are carried as given.
    """

    def __init__(self, name, caname, url, connection_options=None, tlsCACerts=None, registrar=None):

        _logger.debug('CertificateAuthority.const')

        if not name:
            raise ValueError('Missing name parameter')

        if not url:
            raise ValueError('Missing url parameter')

        self._name = name

        if caname:
            self._caname = caname
        else:
            self._caname = name

        self._url = url
        self._connection_options = connection_options
        self._tlsCACerts = tlsCACerts
        self._registrar = registrar

    @property
    def name(self):
        return self._name

    @property
    def caname(self):
        return self._caname

    @property
    def url(self):
        return self._url

    @property
    def connectionOptions(self):
        return self._connection_options

    @property
    def tlsCACerts(self):
        return self._tlsCACerts

    @property
    def registrar(self):
        return self._registrar

    def __str__(self):
        return f'CertificateAuthority: {self._name}, url: {self._url}'
