import importlib
import json
import logging
import os

import yaml

from fabnet.fabric.baseClient import BaseClient
from fabnet.fabric.channel.channel import Channel
from fabnet.fabric.orderer import Orderer
from fabnet.fabric.peer import Peer

_logger = logging.getLogger(__name__)


class Client(BaseClient):
    """
        Main interaction handler with end user.
        Client can maintain several channels.
    """

    def __init__(self):
        super(Client, self).__init__()

        self._clientConfigMspid = None
        self._network_config = None
        self._tls_mutual = {}
        self._channels = {}
        self._configChannels = set()

    @staticmethod
    def loadFromConfig(loadConfig):
        client = Client()
        client._loadFromConfig(loadConfig)
        return client

    def addNetworkConfig(self, loadConfig):
        """Merge one more connection profile into the one already loaded."""
        self._loadFromConfig(loadConfig)

    def _loadFromConfig(self, loadConfig):
        additional_network_config = _getNetworkConfig(loadConfig, self)
        if not self._network_config:
            self._network_config = additional_network_config
        else:
            self._network_config.mergeSettings(additional_network_config)
            # channels built from the previous profile are rebuilt on next lookup
            for name in self._configChannels:
                self._channels.pop(name, None)
            self._configChannels.clear()

        if self._network_config.hasClient():
            self._setMspidFromConfig()

    def _setMspidFromConfig(self):
        client_config = self._network_config.getClientConfig()
        if client_config.get('organization'):
            organization = self._network_config.getOrganization(client_config['organization'])
            if organization:
                self._clientConfigMspid = organization.mspid

    def setTlsClientCertAndKey(self, clientCert=None, clientKey=None):
        _logger.debug('setTlsClientCertAndKey - start')
        if clientCert and clientKey:
            self._tls_mutual['clientCert'] = clientCert
            self._tls_mutual['clientKey'] = clientKey
            self._tls_mutual['selfGenerated'] = False

    def addTlsClientCertAndKey(self, opts):
        if self._tls_mutual.get('selfGenerated'):
            return
        if self._tls_mutual.get('clientCert') and self._tls_mutual.get('clientKey'):
            if not opts.get('clientCert'):
                opts['clientCert'] = self._tls_mutual['clientCert']
                opts['clientKey'] = self._tls_mutual['clientKey']

    def newChannel(self, name):
        if name in self._channels:
            raise ValueError(f'Channel {name} already exists')
        channel = Channel(name, self)
        self._channels[name] = channel
        return channel

    def getChannel(self, name=None, raise_error=True):
        channel = None
        if name:
            channel = self._channels.get(name)
        elif len(self._channels) > 0:
            # first one
            channel = next(iter(self._channels.values()))

        if channel:
            return channel

        if self._network_config:
            if not name:
                channel_names = self._network_config.getChannelNames()
                if channel_names:
                    name = channel_names[0]

            if name:
                channel = self._network_config.getChannel(name)

        if channel:
            self._channels[name] = channel
            self._configChannels.add(name)
            return channel

        errorMessage = f'Channel not found for name {name}'
        if raise_error:
            _logger.error(errorMessage)
            raise ValueError(errorMessage)
        else:
            _logger.debug(errorMessage)

        return None

    def getPeer(self, name):
        peer = None

        if self._network_config:
            peer = self._network_config.getPeer(name)

        if not peer:
            raise ValueError(f'Peer with name:{name} not found')

        return peer

    def getPeersForOrg(self, mspid=None):
        _mspid = mspid

        if not mspid:
            _mspid = self.getMspid()

        if _mspid and self._network_config:
            organization = self._network_config.getOrganizationByMspId(_mspid)
            if organization:
                return organization.getPeers()

        return []

    def getOrderer(self, name):
        orderer = None
        if self._network_config:
            orderer = self._network_config.getOrderer(name)

        if not orderer:
            raise ValueError(f'Orderer with name:{name} not found')

        return orderer

    def getCertificateAuthority(self, name=None):
        if not self._network_config:
            raise ValueError('No common connection profile has been loaded')

        ca_info = None

        if name:
            ca_info = self._network_config.getCertificateAuthority(name)
        else:
            client_config = self._network_config.getClientConfig()
            if client_config.get('organization'):
                organization = self._network_config.getOrganization(client_config['organization'])
                if organization:
                    ca_infos = organization.getCertificateAuthorities()
                    if len(ca_infos) > 0:
                        ca_info = ca_infos[0]

        if not ca_info:
            raise ValueError('Common connection profile is missing this client\'s organization and certificate authority')

        return ca_info

    def getClientConfig(self):
        if self._network_config and self._network_config.hasClient():
            return self._network_config.getClientConfig()
        return None

    def getMspid(self):
        return self._clientConfigMspid

    def getTargetPeers(self, request_targets):
        method = 'getTargetPeers'
        _logger.debug(f'{method} - start')

        targets = []
        targetsTemp = request_targets
        if request_targets:
            if not isinstance(request_targets, list):
                targetsTemp = [request_targets]
            for target_peer in targetsTemp:
                if isinstance(target_peer, str):
                    targets.append(self.getPeer(target_peer))
                elif isinstance(target_peer, Peer):
                    targets.append(target_peer)
                else:
                    raise ValueError('Target peer is not a valid peer object instance')

        if len(targets) > 0:
            return targets
        else:
            return None

    def getTargetOrderer(self, request_orderer=None, channel_orderers=None, channel_name=None):
        method = 'getTargetOrderer'
        _logger.debug(f'{method} - start')

        if request_orderer:
            if isinstance(request_orderer, str):
                orderer = self.getOrderer(request_orderer)
            elif isinstance(request_orderer, Orderer):
                orderer = request_orderer
            else:
                raise ValueError('"orderer" request parameter is not valid. Must be an orderer name or "Orderer" object.')
        elif channel_orderers and isinstance(channel_orderers, list):
            orderer = channel_orderers[0]
        elif channel_name and self._network_config:
            temp_channel = self.getChannel(channel_name, False)
            if temp_channel:
                temp_orderers = temp_channel.getOrderers()
                if temp_orderers:
                    orderer = temp_orderers[0]
                else:
                    raise ValueError('"orderer" request parameter is missing and there are no orderers defined on this'
                                     ' channel in the common connection profile')
            else:
                raise ValueError(f'Channel name {channel_name} was not found in the common connection profile')
        else:
            raise ValueError('Missing "orderer" request parameter')

        return orderer


def _readNetworkData(network_config_loc):
    with open(network_config_loc, 'r') as f:
        file_data = f.read()

    _, file_ext = os.path.splitext(network_config_loc)
    if file_ext.lower() in ('.yaml', '.yml'):
        return yaml.safe_load(file_data)

    return json.loads(file_data)


def _loadClass(dotted_path):
    module_name, class_name = dotted_path.rsplit('.', 1)
    return getattr(importlib.import_module(module_name), class_name)


def _getNetworkConfig(loadConfig, client):
    method = '_getNetworkConfig'

    if isinstance(loadConfig, str):
        network_config_loc = os.path.abspath(loadConfig)
        _logger.debug(f'{method} - looking at absolute path of ==>{network_config_loc}<==')
        network_data = _readNetworkData(network_config_loc)
    else:
        network_data = loadConfig

    try:
        if not network_data:
            raise ValueError('missing configuration data')
        if 'version' not in network_data:
            raise ValueError('"version" is missing')

        parsing = Client.getConfigSetting('network-config-schema')
        if not parsing:
            raise ValueError('missing "network-config-schema" configuration setting')

        pieces = str(network_data['version']).split('.')
        version = '.'.join(pieces[:2])
        if version not in parsing:
            raise ValueError('common connection profile has an unknown "version"')

        network_config_class = _loadClass(parsing[version])
    except ValueError as e:
        raise ValueError(f'Invalid common connection profile due to {e}')

    roles = Client.getConfigSetting('network-config-roles')
    return network_config_class(network_data, client, roles=roles)
