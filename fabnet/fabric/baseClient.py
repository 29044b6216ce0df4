from fabnet.fabric.config.config import Config
from fabnet.util.utils import getConfigSetting, setConfigSetting


class BaseClient(object):

    @staticmethod
    def getConfigSetting(name, default_value=None):
        return getConfigSetting(name, default_value)

    @staticmethod
    def setConfigSetting(name, value):
        setConfigSetting(name, value)

    @staticmethod
    def addConfigFile(path):
        Config().file(path)
