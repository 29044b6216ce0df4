import logging


_logger = logging.getLogger(__name__)


class Organization(object):
    """A member organization of the network.

    Holds the peers and certificate authorities the connection profile lists
    for it, plus the PEM encoded admin key and certificate when given.
    """

    def __init__(self, name, mspid):
        _logger.debug(f'Organization.const - name: {name} mspid: {mspid}')

        if not name:
            raise ValueError('Missing name parameter')
        if not mspid:
            raise ValueError('Missing mspid parameter')

        self._name = name
        self._mspid = mspid
        self._peers = []
        self._certificateAuthorities = []
        self._adminPrivateKeyPEM = None
        self._adminCertPEM = None

    @property
    def name(self):
        return self._name

    @property
    def mspid(self):
        return self._mspid

    def addPeer(self, peer):
        self._peers.append(peer)

    def getPeers(self):
        return self._peers

    def getPeer(self, name):
        for peer in self._peers:
            if peer.name == name:
                return peer
        return None

    def addCertificateAuthority(self, certificateAuthority):
        self._certificateAuthorities.append(certificateAuthority)

    def getCertificateAuthorities(self):
        return self._certificateAuthorities

    def getCertificateAuthority(self, name):
        for ca in self._certificateAuthorities:
            if ca.name == name:
                return ca
        return None

    def setAdminPrivateKey(self, adminPrivateKeyPEM):
        self._adminPrivateKeyPEM = adminPrivateKeyPEM

    def getAdminPrivateKey(self):
        return self._adminPrivateKeyPEM

    def setAdminCert(self, adminCertPEM):
        self._adminCertPEM = adminCertPEM

    def getAdminCert(self):
        return self._adminCertPEM

    def hasAdmin(self):
        return bool(self._adminPrivateKeyPEM and self._adminCertPEM)

    def __str__(self):
        peers = ', '.join([peer.name for peer in self._peers])
        cas = ', '.join([ca.name for ca in self._certificateAuthorities])

        return f'Organization {self._name}, mspid: {self._mspid}, peers [{peers}], certificateAuthorities [{cas}]'
