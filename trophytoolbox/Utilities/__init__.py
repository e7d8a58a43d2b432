from .Logger import Logger
from .Settings import AppSettings, SettingsManager
