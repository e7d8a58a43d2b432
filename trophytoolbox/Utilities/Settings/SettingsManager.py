import os
import json
from ..Logger import Logger
from .AppSettings import AppSettings


class SettingsManager:
    setting_file_path = os.path.join(os.path.expanduser("~"), ".trophytoolbox", "Settings.conf")

    @staticmethod
    def save_settings(settings, file_path):
        try:
            directory = os.path.dirname(file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(file_path, 'w') as f:
                json.dump(settings.__dict__, f, indent=4)
        except OSError as ex:
            Logger.log_error(f"Error in saving settings: {ex}")
            raise

    @staticmethod
    def load_settings(file_path=None):
        settings = AppSettings()
        file_path = file_path or SettingsManager.setting_file_path
        try:
            if os.path.exists(file_path):
                with open(file_path, 'r') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("settings file must contain a JSON object")
                defaults = settings.__dict__
                for key, value in loaded.items():
                    if key not in defaults:
                        continue
                    if not isinstance(value, type(defaults[key])):
                        Logger.log_warning(f"Ignoring setting '{key}': expected {type(defaults[key]).__name__}, got {type(value).__name__}")
                        continue
                    defaults[key] = value
        except (OSError, ValueError) as ex:
            Logger.log_error(f"Error in loading settings: {ex}")
        return settings
