import logging

from fabnet.fabric.remote import Remote

_logger = logging.getLogger(__name__)


class Peer(Remote):
    def __init__(self, url, opts=None, eventUrl=None):

        super(Peer, self).__init__(url, opts)

        _logger.debug(f'Peer.const - url: {url} timeout: {self._request_timeout} name: {self.name}')

        self._eventUrl = eventUrl
        self._roles = {}

    @property
    def eventUrl(self):
        return self._eventUrl

    def setRole(self, role, isIn):
        self._roles[role] = isIn

    def isInRole(self, role):
        """A role never set on this peer counts as held."""
        if not role:
            raise ValueError('Missing "role" parameter')

        return self._roles.get(role, True)

    def getRoles(self):
        return dict(self._roles)

    def __str__(self):
        return f'Peer: {self._url}'
