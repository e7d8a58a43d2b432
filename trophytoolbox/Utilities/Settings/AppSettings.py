import os


class AppSettings:
    def __init__(self):
        self.output_directory = os.path.join(os.path.expanduser("~"), ".trophytoolbox", "metadata")
        self.trophy_key = ""
        self.log_file = ""
        self.log_level = "INFO"
