import logging
from hashlib import sha256
from urllib.parse import urlparse

import aiogrpc
import grpc

from fabnet.util.utils import pem_to_der, getConfigSetting, checkIntegerConfig

MAX_SEND = 'grpc.max_send_message_length'
MAX_RECEIVE = 'grpc.max_receive_message_length'
MAX_SEND_V10 = 'grpc-max-send-message-length'
MAX_RECEIVE_V10 = 'grpc-max-receive-message-length'

USE_WAIT_FOR_READY = 'useWaitForReady'
SSL_TARGET_NAME_OVERRIDE = 'ssl-target-name-override'

# entries of the options bag that are not gRPC channel arguments
_NON_CHANNEL_OPTIONS = ('pem', 'clientCert', 'clientKey', 'name', 'request-timeout',
                        'grpc-wait-for-ready-timeout', SSL_TARGET_NAME_OVERRIDE, USE_WAIT_FOR_READY)

_logger = logging.getLogger(__name__)


class Endpoint(object):
    """Address of a remote. Parsing does no validation and no I/O."""

    def __init__(self, url, pem=None, clientKey=None, clientCert=None):
        purl = urlparse(url or '')

        self.protocol = purl.scheme
        self.addr = purl.netloc
        self._pem = pem
        self._clientKey = clientKey
        self._clientCert = clientCert

    def isTLS(self):
        return self.protocol == 'grpcs'

    @property
    def creds(self):
        if self.protocol == 'grpc':
            return None
        elif self.protocol == 'grpcs':
            if not isinstance(self._pem, str):
                raise ValueError('PEM encoded certificate is required.')

            if self._clientCert and self._clientKey:
                return grpc.ssl_channel_credentials(self._pem.encode(),
                                                    private_key=self._clientKey.encode(),
                                                    certificate_chain=self._clientCert.encode())
            return grpc.ssl_channel_credentials(self._pem.encode())
        else:
            raise ValueError(f'Invalid protocol: {self.protocol}. URLs must begin with grpc:// or grpcs://')


class Remote(object):

    def __init__(self, url, opts=None):
        opts = dict(opts) if opts else {}

        # the option bag is kept as given, channel arguments are derived from it
        self._opts = opts
        self._options = {}

        # default
        self.useWaitForReady = False

        for key, value in opts.items():
            if key == USE_WAIT_FOR_READY:
                if isinstance(value, bool):
                    self.useWaitForReady = value
                continue
            if key not in _NON_CHANNEL_OPTIONS and key not in (MAX_SEND_V10, MAX_RECEIVE_V10):
                self._options[key] = value

        self.clientCert = opts.get('clientCert')

        # connection options
        if isinstance(opts.get(SSL_TARGET_NAME_OVERRIDE), str):
            self._options['grpc.ssl_target_name_override'] = opts[SSL_TARGET_NAME_OVERRIDE]
            self._options['grpc.default_authority'] = opts[SSL_TARGET_NAME_OVERRIDE]

        self._options[MAX_RECEIVE] = _messageLimit(opts, MAX_RECEIVE_V10, MAX_RECEIVE)
        self._options[MAX_SEND] = _messageLimit(opts, MAX_SEND_V10, MAX_SEND)

        self._url = url
        self._pem = opts.get('pem')
        self._endpoint = Endpoint(url, self._pem, opts.get('clientKey'), self.clientCert)

        if opts.get('name'):
            self._name = opts['name']
        else:
            self._name = self._endpoint.addr or url

        if checkIntegerConfig(opts, 'request-timeout'):
            self._request_timeout = opts['request-timeout']
        else:
            self._request_timeout = getConfigSetting('request-timeout', 30000)  # default 30 seconds

        if checkIntegerConfig(opts, 'grpc-wait-for-ready-timeout'):
            self._grpc_wait_for_ready_timeout = opts['grpc-wait-for-ready-timeout']
        else:
            self._grpc_wait_for_ready_timeout = getConfigSetting('grpc-wait-for-ready-timeout', 3000)  # default 3 seconds

        self._channel = None

        _logger.debug(f' ** Remote instance url: {self._url}, name: {self._name}, options loaded are:: {self._options}')

    @property
    def name(self):
        return self._name

    def setName(self, name):
        self._name = name

    @property
    def url(self):
        return self._url

    @property
    def tlsCACert(self):
        return self._pem

    @property
    def requestTimeout(self):
        return self._request_timeout

    @property
    def grpcWaitForReadyTimeout(self):
        return self._grpc_wait_for_ready_timeout

    def getOptions(self):
        return self._opts

    def getGrpcOptions(self):
        return self._options

    def getGrpcChannel(self):
        """Open the asyncio gRPC channel to this remote on first use."""
        if self._channel is None:
            creds = self._endpoint.creds
            options = list(self._options.items())
            _logger.debug(f'getGrpcChannel - opening connection {self._endpoint.addr}')
            if creds is None:
                self._channel = aiogrpc.insecure_channel(self._endpoint.addr, options)
            else:
                self._channel = aiogrpc.secure_channel(self._endpoint.addr, creds, options)

        return self._channel

    def close(self):
        if self._channel is not None:
            _logger.debug(f'close - closing connection {self._endpoint.addr}')
            self._channel.close()
            self._channel = None

    def getClientCertHash(self):
        if self.clientCert:
            b64der = pem_to_der(self.clientCert)
            return sha256(b64der).digest()

        return None

    def getCharacteristics(self):
        options = dict(self._opts)
        options.pop('clientKey', None)

        return {
            'url': self._url,
            'name': self._name,
            'options': options,
        }

    def isTLS(self):
        return self._endpoint.isTLS()

    def __str__(self):
        return f'Remote: {self._url}'


def _messageLimit(opts, v10_key, grpc_key):
    if v10_key in opts:
        return opts[v10_key]
    if grpc_key in opts:
        return opts[grpc_key]

    limit = getConfigSetting(v10_key)
    if limit is None:
        limit = getConfigSetting(grpc_key)

    if limit is None:
        limit = -1  # default is unlimited

    return limit
