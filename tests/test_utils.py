"""
Tests for certificate resolution and the other helpers of fabnet.util.utils.
"""

import pytest
from cryptography.hazmat.primitives import serialization

from fabnet.util.utils import (
    checkIntegerConfig,
    getConfigSetting,
    getPEMfromConfig,
    getTLSCACert,
    normalizeX509,
    pem_to_der,
    readFileSync,
    setConfigSetting,
)

RAW_CERT = '-----BEGIN CERTIFICATE-----\r\nMIIBAAAA\r\n  MIIBBBBB  \r\n-----END CERTIFICATE-----\r\n\r\n'
NORMALIZED_CERT = '-----BEGIN CERTIFICATE-----\nMIIBAAAA\nMIIBBBBB\n-----END CERTIFICATE-----'


class TestNormalizeX509:
    def test_line_endings_and_trailing_feed(self):
        assert normalizeX509(RAW_CERT) == NORMALIZED_CERT

    def test_chain_keeps_every_block(self):
        chain = RAW_CERT + RAW_CERT.replace('MIIB', 'MIIC')
        result = normalizeX509(chain)

        assert result.count('-----BEGIN CERTIFICATE-----') == 2
        assert result.endswith('-----END CERTIFICATE-----')
        assert 'MIICAAAA' in result

    def test_text_without_block_is_stripped(self):
        assert normalizeX509('not a pem  \n\n') == 'not a pem'


class TestGetPEMfromConfig:
    def test_inline_pem_returned_verbatim(self):
        assert getPEMfromConfig({'pem': 'CERT'}) == 'CERT'

    def test_inline_pem_wins_over_path(self):
        def read_file(path):
            raise AssertionError('the file must not be read')

        assert getPEMfromConfig({'pem': 'CERT', 'path': '/does/not/exist'}, read_file) == 'CERT'

    def test_path_gets_one_trailing_newline(self, tmp_path):
        cert_file = tmp_path / 'ca.pem'
        cert_file.write_text(RAW_CERT)

        result = getPEMfromConfig({'path': str(cert_file)})

        assert result == NORMALIZED_CERT + '\n'
        assert result.rstrip() + '\n' == result

    def test_relative_path_resolved_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / 'certs').mkdir()
        (tmp_path / 'certs' / 'ca.pem').write_text(RAW_CERT)
        monkeypatch.chdir(tmp_path)

        assert getPEMfromConfig({'path': 'certs/ca.pem'}) == NORMALIZED_CERT + '\n'

    def test_injected_reader(self):
        paths = []

        def read_file(path):
            paths.append(path)
            return RAW_CERT

        assert getPEMfromConfig({'path': 'ca.pem'}, read_file) == NORMALIZED_CERT + '\n'
        assert paths == ['ca.pem']

    @pytest.mark.parametrize('descriptor', [None, {}, {'other': 'value'}, {'pem': '', 'path': ''}, 'ca.pem', ['ca.pem'], True])
    def test_malformed_descriptor_is_absent(self, descriptor):
        assert getPEMfromConfig(descriptor) is None

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            getPEMfromConfig({'path': str(tmp_path / 'missing.pem')})


def test_get_tls_ca_cert():
    assert getTLSCACert({'url': 'grpc://a:7051', 'tlsCACerts': {'pem': 'CERT'}}) == 'CERT'
    assert getTLSCACert({'url': 'grpc://a:7051'}) is None
    assert getTLSCACert(None) is None


def test_read_file_sync(tmp_path):
    target = tmp_path / 'data.txt'
    target.write_text('content')

    assert readFileSync(str(target)) == 'content'

    with pytest.raises(OSError):
        readFileSync(str(tmp_path / 'nothing.txt'))


def test_pem_to_der(self_signed):
    cert_pem, _, certificate = self_signed

    der = pem_to_der(cert_pem)

    assert der == certificate.public_bytes(serialization.Encoding.DER)
    assert pem_to_der(cert_pem.encode()) == der


def test_check_integer_config():
    opts = {'request-timeout': 1000, 'flag': True, 'text': '1000'}

    assert checkIntegerConfig(opts, 'request-timeout')
    assert not checkIntegerConfig(opts, 'flag')
    assert not checkIntegerConfig(opts, 'text')
    assert not checkIntegerConfig(opts, 'missing')
    assert not checkIntegerConfig(None, 'request-timeout')


def test_config_setting_accessors():
    assert getConfigSetting('request-timeout') == 30000
    assert getConfigSetting('not-a-setting', 'fallback') == 'fallback'

    setConfigSetting('request-timeout', 5000)

    assert getConfigSetting('request-timeout') == 5000
