import copy
import logging
import os

from fabnet.fabric.certificateAuthority import CertificateAuthority
from fabnet.fabric.channel.channel import Channel
from fabnet.fabric.eventHub import EventHub
from fabnet.fabric.orderer import Orderer
from fabnet.fabric.organization import Organization
from fabnet.fabric.peer import Peer
from fabnet.util.utils import getPEMfromConfig, getTLSCACert, readFileSync

_logger = logging.getLogger(__name__)

CLIENT_CONFIG = 'client'
CHANNELS_CONFIG = 'channels'
ORGS_CONFIG = 'organizations'
PEERS_CONFIG = 'peers'
ORDERERS_CONFIG = 'orderers'
CAS_CONFIG = 'certificateAuthorities'
ADMIN_PRIVATE_KEY = 'adminPrivateKey'
ADMIN_CERT = 'signedCert'
GRPC_CONNECTION_OPTIONS = 'grpcOptions'
HTTP_CONNECTION_OPTIONS = 'httpOptions'
URL = 'url'
EVENT_URL = 'eventUrl'
NAME = 'name'
CANAME = 'caName'
MSPID = 'mspid'
REGISTRAR = 'registrar'

# the sections replaced by mergeSettings, in this order
SECTIONS = (CLIENT_CONFIG, CHANNELS_CONFIG, ORGS_CONFIG, ORDERERS_CONFIG, PEERS_CONFIG, CAS_CONFIG)

ENDORSER = 'endorser'
ORDERER = 'orderer'
EVENTHUB = 'eventHub'


class NetworkConfig_1_0(object):
    """Resolves a v1.0 common connection profile into network entities.

    Only the raw profile is held. Every lookup builds new entities from it,
    so a merged profile is visible to the next lookup. Names missing from the
    profile resolve to None; the one error raised out of a lookup is the
    ``OSError`` of a certificate file that cannot be read.

    Args:
        network_config (dict): the connection profile
        client_context (object): client the entities are built for, asked for
            mutual TLS material when it offers ``addTlsClientCertAndKey``
        read_file (callable): reads a certificate file given its path
        roles (iterable): channel roles to accept from the profile, any
            boolean entry is accepted when None
    """

    def __init__(self, network_config, client_context=None, read_file=None, roles=None):
        _logger.debug(f'constructor, network_config: {network_config}')
        self._network_config = network_config if network_config is not None else {}
        self._client_context = client_context
        self._read_file = read_file or readFileSync
        self._roles = frozenset(roles) if roles is not None else None

    def mergeSettings(self, additions):
        method = 'mergeSettings'
        _logger.debug(f'{method} - additions start')

        if additions is None or not additions._network_config:
            return

        for section in SECTIONS:
            if additions._network_config.get(section):
                _logger.debug(f'{method} - replacing section {section}')
                self._network_config[section] = copy.deepcopy(additions._network_config[section])

    def hasClient(self):
        return bool(self._network_config.get(CLIENT_CONFIG))

    def getClientConfig(self):
        result = {}
        client_config = self._network_config.get(CLIENT_CONFIG)
        if not client_config:
            return result

        if client_config.get('organization'):
            result['organization'] = client_config['organization']

        credential_store = client_config.get('credentialStore')
        if credential_store:
            result['credentialStore'] = _resolveStorePaths(credential_store, nested='cryptoStore')
            crypto_store = credential_store.get('cryptoStore')
            if crypto_store:
                result['credentialStore']['cryptoStore'] = _resolveStorePaths(crypto_store)

        return result

    def getChannelNames(self):
        return list(self._section(CHANNELS_CONFIG))

    def getChannel(self, name):
        method = 'getChannel'
        _logger.debug(f'{method} - name {name}')

        channel_config = self._lookup(CHANNELS_CONFIG, name) if name else None
        if channel_config is None:
            return None

        try:
            channel = Channel(name, self._client_context)
        except ValueError as e:
            _logger.warning(f'{method} - channel {name} cannot be built :: {e}')
            return None

        self._addPeers(channel, channel_config)
        self._addOrderers(channel, channel_config)

        return channel

    def getPeer(self, name, channel_org=None):
        method = 'getPeer'
        _logger.debug(f'{method} - name {name}')

        peer_config = self._lookup(PEERS_CONFIG, name)
        if peer_config is None:
            return None

        opts = self._buildOptions(peer_config, ENDORSER)
        peer = Peer(peer_config.get(URL), opts, peer_config.get(EVENT_URL))

        peer.setName(name)

        if isinstance(channel_org, dict):
            for role, value in channel_org.items():
                if not isinstance(value, bool):
                    continue
                if self._roles is not None and role not in self._roles:
                    _logger.debug(f'{method} - ignoring unknown role {role} of peer {name}')
                    continue
                peer.setRole(role, value)

        return peer

    def getEventHub(self, name):
        method = 'getEventHub'
        _logger.debug(f'{method} - name {name}')

        peer_config = self._lookup(PEERS_CONFIG, name)
        if peer_config is None:
            return None

        opts = self._buildOptions(peer_config, EVENTHUB)
        event_hub = EventHub(self._client_context)
        if peer_config.get(EVENT_URL):
            event_hub.setPeerAddr(peer_config[EVENT_URL], opts)
        else:
            _logger.debug(f'{method} - peer {name} has no {EVENT_URL}')

        return event_hub

    def getOrderer(self, name):
        method = 'getOrderer'
        _logger.debug(f'{method} - name {name}')

        orderer_config = self._lookup(ORDERERS_CONFIG, name)
        if orderer_config is None:
            return None

        opts = self._buildOptions(orderer_config, ORDERER)
        orderer = Orderer(orderer_config.get(URL), opts)

        # the entity takes the name declared inside the section
        if orderer_config.get(NAME):
            orderer.setName(orderer_config[NAME])

        return orderer

    def getOrganization(self, name):
        method = 'getOrganization'
        _logger.debug(f'{method} - name {name}')

        organization_config = self._lookup(ORGS_CONFIG, name) if name else None
        if organization_config is None:
            return None

        try:
            organization = Organization(name, organization_config.get(MSPID))
        except ValueError as e:
            _logger.warning(f'{method} - organization {name} cannot be built :: {e}')
            return None

        for peer_name in _names(organization_config.get(PEERS_CONFIG)):
            peer = self.getPeer(peer_name)
            if peer:
                organization.addPeer(peer)
            else:
                _logger.debug(f'{method} - skipping unknown peer {peer_name} of organization {name}')

        for ca_name in _names(organization_config.get(CAS_CONFIG)):
            ca = self.getCertificateAuthority(ca_name)
            if ca:
                organization.addCertificateAuthority(ca)
            else:
                _logger.debug(f'{method} - skipping unknown certificate authority {ca_name} of organization {name}')

        if organization_config.get(ADMIN_PRIVATE_KEY):
            key = getPEMfromConfig(organization_config[ADMIN_PRIVATE_KEY], self._read_file)
            organization.setAdminPrivateKey(key)

        if organization_config.get(ADMIN_CERT):
            cert = getPEMfromConfig(organization_config[ADMIN_CERT], self._read_file)
            organization.setAdminCert(cert)

        return organization

    def getOrganizations(self):
        method = 'getOrganizations'
        _logger.debug(f'{method} - start')

        organizations = []
        for organization_name in self._section(ORGS_CONFIG):
            organization = self.getOrganization(organization_name)
            if organization:
                organizations.append(organization)

        return organizations

    def getOrganizationByMspId(self, mspid):
        method = 'getOrganizationByMspId'
        _logger.debug(f'{method} - mspid {mspid}')

        for organization_name, organization_config in self._section(ORGS_CONFIG).items():
            if isinstance(organization_config, dict) and organization_config.get(MSPID) == mspid:
                organization = self.getOrganization(organization_name)
                if organization:
                    return organization

        return None

    def getCertificateAuthority(self, name):
        method = 'getCertificateAuthority'
        _logger.debug(f'{method} - name {name}')

        ca_config = self._lookup(CAS_CONFIG, name) if name else None
        if ca_config is None:
            return None

        tls_cert = getTLSCACert(ca_config, self._read_file)
        try:
            return CertificateAuthority(
                name,
                ca_config.get(CANAME),
                ca_config.get(URL),
                ca_config.get(HTTP_CONNECTION_OPTIONS),
                tls_cert,
                ca_config.get(REGISTRAR)
            )
        except ValueError as e:
            _logger.warning(f'{method} - certificate authority {name} cannot be built :: {e}')
            return None

    def _section(self, section):
        config = self._network_config.get(section)
        return config if isinstance(config, dict) else {}

    def _lookup(self, section, name):
        # entries are keyed by name, anything else cannot reference one
        if not isinstance(name, str):
            return None
        config = self._section(section).get(name)
        return config if isinstance(config, dict) else None

    def _buildOptions(self, config, timeout_type):
        opts = {'pem': getTLSCACert(config, self._read_file)}
        opts.update(config.get(GRPC_CONNECTION_OPTIONS) or {})
        self._addTimeout(opts, timeout_type)

        if hasattr(self._client_context, 'addTlsClientCertAndKey'):
            self._client_context.addTlsClientCertAndKey(opts)

        return opts

    def _addTimeout(self, opts, timeout_type):
        method = '_addTimeout'
        if 'request-timeout' in opts:
            return

        client_config = self._network_config.get(CLIENT_CONFIG) or {}
        timeouts = (client_config.get('connection') or {}).get('timeout') or {}

        if timeout_type == ORDERER:
            timeout = timeouts.get(ORDERER)
        else:
            timeout = (timeouts.get('peer') or {}).get(timeout_type)

        if timeout is None:
            return

        try:
            seconds = int(timeout)
        except (TypeError, ValueError):
            _logger.warning(f'{method} - ignoring {timeout_type} timeout that is not a number: {timeout}')
            return

        if seconds:
            opts['request-timeout'] = seconds * 1000

    def _getMspIdForPeer(self, peer_name):
        for organization_config in self._section(ORGS_CONFIG).values():
            if isinstance(organization_config, dict) and peer_name in _names(organization_config.get(PEERS_CONFIG)):
                return organization_config.get(MSPID)
        return None

    def _addPeers(self, channel, channel_config):
        channel_peers = channel_config.get(PEERS_CONFIG) if channel_config else None
        if not isinstance(channel_peers, dict):
            return

        for peer_name, channel_peer in channel_peers.items():
            peer = self.getPeer(peer_name, channel_peer if isinstance(channel_peer, dict) else {})
            if peer:
                channel.addPeer(peer, self._getMspIdForPeer(peer_name))
            else:
                _logger.debug(f'_addPeers - skipping unknown peer {peer_name} of channel {channel.name}')

    def _addOrderers(self, channel, channel_config):
        orderer_names = channel_config.get(ORDERERS_CONFIG) if channel_config else None
        if not isinstance(orderer_names, list):
            return

        for orderer_name in orderer_names:
            orderer = self.getOrderer(orderer_name)
            if not orderer:
                _logger.debug(f'_addOrderers - skipping unknown orderer {orderer_name} of channel {channel.name}')
                continue
            if channel.hasOrderer(orderer.name):
                _logger.debug(f'_addOrderers - orderer {orderer.name} already on channel {channel.name}')
                continue
            channel.addOrderer(orderer)


def _names(value):
    return value if isinstance(value, list) else []


def _resolveStorePaths(store, nested=None):
    result = {}
    if store.get('path'):
        result['path'] = os.path.abspath(store['path'])
    for setting, value in store.items():
        if setting != 'path' and setting != nested:
            result[setting] = value
    return result
