import json
import logging
import re

from fabnet.fabric.peer import Peer

_logger = logging.getLogger(__name__)

CHANNEL_NAME_PATTERN = '^[a-z][a-z0-9.-]*$'


class DuplicatePeer(Exception):
    pass


class DuplicateOrderer(Exception):
    pass


class Channel(object):
    """The class represents of the channel.

    This is a client-side-only view: the peers (with the roles they hold on
    this channel) and the orderers addressed when working with it.
    """

    def __init__(self, name, clientContext=None):
        """Construct channel instance

        Args:
            name (str): a unique name serves as the identifier of the channel
            clientContext (object): client instance, which provides
            operational context
        """
        if not isinstance(name, str) or not re.match(CHANNEL_NAME_PATTERN, name):
            raise ValueError(f'Failed to create Channel. channel name should'
                             f' match Regex {CHANNEL_NAME_PATTERN}, but got {name}')

        self._name = name
        self._channel_peers = {}
        self._orderers = {}
        self._clientContext = clientContext

        _logger.debug(f'Constructed Channel instance name - {self._name}')

    @property
    def name(self):
        return self._name

    def getName(self):
        return self._name

    def close(self):
        _logger.debug(f'close - closing connections')
        for channel_peer in self._channel_peers.values():
            channel_peer.close()

        for orderer in self._orderers.values():
            orderer.close()

    def addPeer(self, peer, mspid=None, roles=None, replace=False):
        name = peer.name

        if name in self._channel_peers:
            if replace:
                _logger.debug(f'removing old peer  --name: {name} --URL: {peer.url}')
                self.removePeer(self._channel_peers[name])
            else:
                msg = f'Peer {name} already exists'
                _logger.error(msg)
                raise DuplicatePeer(msg)

        _logger.debug(f'adding a new peer  --name: {name} --URL: {peer.url}')

        if roles is None:
            roles = peer.getRoles()

        self._channel_peers[name] = ChannelPeer(mspid, self, peer, roles)

    def removePeer(self, peer):
        del self._channel_peers[peer.name]

    def getChannelPeer(self, name):
        channel_peer = self._channel_peers.get(name)

        if not channel_peer:
            raise ValueError(f'Peer with name "{name}" not assigned to this channel')

        return channel_peer

    def getPeer(self, name):
        return self.getChannelPeer(name).peer

    def getChannelPeers(self):
        return list(self._channel_peers.values())

    def getPeers(self):
        _logger.debug(f'getPeers - list size: {len(self._channel_peers)}')
        return [channel_peer.peer for channel_peer in self._channel_peers.values()]

    def hasOrderer(self, name):
        return name in self._orderers

    def addOrderer(self, orderer, replace=False):
        name = orderer.name

        if name in self._orderers:
            if replace:
                self.removeOrderer(self._orderers[name])
            else:
                msg = f'Orderer {name} already exists'
                _logger.error(msg)
                raise DuplicateOrderer(msg)

        self._orderers[name] = orderer

    def removeOrderer(self, orderer):
        del self._orderers[orderer.name]

    def getOrderer(self, name):
        orderer = self._orderers.get(name)

        if not orderer:
            raise ValueError(f'Orderer with name "{name}" not assigned to this channel')

        return orderer

    def getOrderers(self):
        _logger.debug(f'getOrderers - list size: {len(self._orderers)}')
        return list(self._orderers.values())

    def getPeersForOrg(self, mspid=None):
        method = 'getPeersForOrg'

        _mspid = mspid
        if not _mspid and self._clientContext is not None:
            _mspid = self._clientContext.getMspid()
            _logger.debug(f'{method} - starting - using client mspid: {_mspid}')
        else:
            _logger.debug(f'{method} - starting - mspid: {_mspid}')

        return [channel_peer for channel_peer in self._channel_peers.values()
                if channel_peer.isInOrg(_mspid)]

    def __str__(self):
        orderers = [str(orderer) for orderer in self.getOrderers()]
        peers = [str(peer) for peer in self.getPeers()]

        state = {
            'name': self._name,
            'orderers': 'N/A' if len(orderers) <= 0 else orderers,
            'peers': 'N/A' if len(peers) <= 0 else peers
        }

        return json.dumps(state)


class ChannelPeer(object):
    """A peer as seen by one channel, with the roles it holds there."""

    def __init__(self, mspid, channel, peer, roles=None):
        if not isinstance(channel, Channel):
            raise ValueError('Missing Channel parameter')
        if not isinstance(peer, Peer):
            raise ValueError('Missing Peer parameter')

        self._mspid = mspid
        self._channel = channel
        self._name = peer.name
        self._peer = peer
        self._roles = {}
        _logger.debug(f'ChannelPeer.const - url: {peer.url}')
        if roles and isinstance(roles, dict):
            self._roles = roles.copy()

    def close(self):
        self._peer.close()

    @property
    def mspid(self):
        return self._mspid

    @property
    def name(self):
        return self._name

    @property
    def url(self):
        return self._peer.url

    @property
    def peer(self):
        return self._peer

    def setRole(self, role, isIn):
        self._roles[role] = isIn

    def isInRole(self, role):
        if not role:
            raise ValueError('Missing "role" parameter')

        return self._roles.get(role, True)

    def getRoles(self):
        return dict(self._roles)

    def isInOrg(self, mspid):
        if not mspid or not self._mspid:
            return True
        else:
            return mspid == self._mspid

    def __str__(self):
        return str(self._peer)
