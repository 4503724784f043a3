import os
import logging
from datetime import datetime

LOG_FILE_NAME = 'chip_parser.log'


def get_log_file():
    """Log file path, in CHIP_PARSER_LOG_DIR when set"""
    log_dir = os.getenv('CHIP_PARSER_LOG_DIR') or os.path.dirname(os.path.abspath(__file__))
    return os.path.join(log_dir, LOG_FILE_NAME)


def setup_logger(name, testing=False):
    """Setup logger that can be toggled for testing"""
    logger = logging.getLogger(name)

    # Only setup handler if testing is enabled and none exists
    if testing and not logger.handlers:
        log_file = os.path.abspath(get_log_file())

        # Use common log file for all components
        if not any(isinstance(h, logging.FileHandler) and h.baseFilename == log_file
                   for h in logging.root.handlers):
            handler = logging.FileHandler(log_file, encoding='utf-8')
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            handler.setFormatter(formatter)

            logging.root.addHandler(handler)
            logging.root.setLevel(logging.DEBUG)

            logging.info('=' * 50)
            logging.info(f'Logging started at {datetime.now()}')
            logging.info('=' * 50)

    return logger
