import logging
import os
import re

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from fabnet.fabric.config.config import Config

_logger = logging.getLogger(__name__)

TLS_CACERTS = 'tlsCACerts'
PEM = 'pem'
PATH = 'path'

_PEM_BLOCK = re.compile(r'-----BEGIN (?P<label>[A-Z0-9 ]+)-----(?P<body>.*?)-----END (?P=label)-----', re.DOTALL)


def getConfigSetting(name, default_value=None):
    return Config().get(name, default_value)


def setConfigSetting(name, value):
    Config().set(name, value)


def checkIntegerConfig(opts, name):
    if opts and name in opts:
        value = opts[name]
        if isinstance(value, int) and not isinstance(value, bool):
            return True
        _logger.debug(f'checkIntegerConfig - {name} is not an integer: {value}')
    return False


def readFileSync(config_path):
    """Read a text file, the path being resolved against the working directory."""
    config_loc = os.path.abspath(config_path)
    try:
        with open(config_loc, 'r') as f:
            return f.read()
    except OSError as e:
        _logger.error(f'readFileSync - problem reading the PEM file :: {e}')
        raise


def normalizeX509(raw):
    """Re-emit every PEM block of ``raw`` with one line per base64 chunk.

    Line endings become ``\\n`` and the result carries no trailing line feed.
    Text holding no PEM block is only stripped of trailing whitespace.
    """
    text = raw.replace('\r\n', '\n').replace('\r', '\n')

    blocks = []
    for match in _PEM_BLOCK.finditer(text):
        label = match.group('label')
        lines = [line.strip() for line in match.group('body').split('\n')]
        blocks.append('\n'.join([f'-----BEGIN {label}-----'] +
                                [line for line in lines if line] +
                                [f'-----END {label}-----']))

    if not blocks:
        return text.rstrip()

    return '\n'.join(blocks)


def getPEMfromConfig(config, read_file=readFileSync):
    """Resolve a certificate descriptor to PEM text.

    An inline ``pem`` always wins over a ``path``. A descriptor with neither
    resolves to None. File read errors are not caught.
    """
    result = None
    if isinstance(config, dict):
        if config.get(PEM):
            # cert value is directly in the configuration
            result = config[PEM]
        elif config.get(PATH):
            # cert value is in a file
            result = read_file(config[PATH])
            result = normalizeX509(result) + '\n'

    return result


def getTLSCACert(config, read_file=readFileSync):
    if config and config.get(TLS_CACERTS):
        return getPEMfromConfig(config[TLS_CACERTS], read_file)
    return None


def pem_to_der(pem):
    if isinstance(pem, str):
        pem = pem.encode()
    certificate = x509.load_pem_x509_certificate(pem)
    return certificate.public_bytes(serialization.Encoding.DER)
