from .AppSettings import AppSettings
from .SettingsManager import SettingsManager
