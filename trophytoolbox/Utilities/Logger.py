import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Logger:
    @staticmethod
    def setup_logger(log_file=None, level=logging.INFO):
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO

        root = logging.getLogger('')
        root.setLevel(logging.DEBUG if log_file else level)
        for handler in [h for h in root.handlers if getattr(h, '_trophytoolbox', False)]:
            root.removeHandler(handler)
            handler.close()

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        console._trophytoolbox = True
        root.addHandler(console)

        if log_file:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            file_handler._trophytoolbox = True
            root.addHandler(file_handler)

    @staticmethod
    def log_information(message):
        try:
            logging.info(message)
        except Exception as e:
            logging.error(f"Error in logging: {str(e)}")

    @staticmethod
    def log_error(message):
        try:
            logging.error(message)
        except Exception as e:
            logging.error(f"Error in logging: {str(e)}")

    @staticmethod
    def log_warning(message):
        try:
            logging.warning(message)
        except Exception as e:
            logging.error(f"Error in logging: {str(e)}")
