import copy
import json
import logging
import os

import yaml

_logger = logging.getLogger(__name__)

DEFAULT = {
    'request-timeout': 30000,
    'grpc-wait-for-ready-timeout': 3000,
    'connection-options': {},
    'network-config-schema': {
        '1.0': 'fabnet.fabric.impl.networkConfig_1_0.NetworkConfig_1_0',
    },
}


def _load_settings_file(path):
    with open(path, 'r') as f:
        data = f.read()

    _, file_ext = os.path.splitext(path)
    if file_ext.lower() in ('.yaml', '.yml'):
        settings = yaml.safe_load(data)
    else:
        settings = json.loads(data)

    if not isinstance(settings, dict):
        raise ValueError(f'Settings file {path} does not hold a mapping')

    return settings


# config is a singleton object
class Config(object):

    class __Config:
        def __init__(self):
            self._fileStores = []
            self._files = {}
            self._config = {}

    instance = None

    def __init__(self):
        if not Config.instance:
            Config.instance = Config.__Config()

    def file(self, path, bottom=False):
        """Add a settings file, searched before older files unless ``bottom``."""
        if not isinstance(path, str):
            raise ValueError('The "path" parameter must be a string')

        path = os.path.abspath(path)
        _logger.debug(f'file - adding settings file {path}')

        if path in self.instance._fileStores:
            self.instance._fileStores.remove(path)

        self.instance._files[path] = _load_settings_file(path)
        if bottom:
            self.instance._fileStores.append(path)
        else:
            self.instance._fileStores.insert(0, path)

    def get(self, name, default_value=None):
        if name in self.instance._config:
            return self.instance._config[name]

        for path in self.instance._fileStores:
            settings = self.instance._files[path]
            if name in settings:
                return settings[name]

        return copy.deepcopy(DEFAULT.get(name, default_value))

    def set(self, name, value):
        self.instance._config[name] = value

    def reset(self):
        Config.instance = Config.__Config()
