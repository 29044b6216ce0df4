import logging

from fabnet.fabric.remote import Remote

_logger = logging.getLogger(__name__)


class Orderer(Remote):

    def __init__(self, url, opts=None):

        super(Orderer, self).__init__(url, opts)

        _logger.debug(f'Orderer.const - url: {url} timeout: {self._request_timeout}')

    def __str__(self):
        return f'Orderer: {self._url}'
