import logging

from fabnet.fabric.remote import Remote

_logger = logging.getLogger(__name__)


class EventHub(object):
    """Event service of a peer, connected once an address is set."""

    def __init__(self, clientContext=None):
        _logger.debug('EventHub.const')

        self._clientContext = clientContext
        self._ep = None

    def setPeerAddr(self, peerUrl, opts=None):
        _logger.debug(f'setPeerAddr - {peerUrl}')
        self._ep = Remote(peerUrl, opts)

    def getPeerAddr(self):
        if self._ep:
            return self._ep.url
        return None

    @property
    def remote(self):
        return self._ep

    def hasPeerAddr(self):
        return self._ep is not None

    def close(self):
        if self._ep:
            self._ep.close()

    def __str__(self):
        return f'EventHub: {self.getPeerAddr()}'
