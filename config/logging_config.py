import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level='INFO'):
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
    # pymongo's topology chatter drowns out request logs at INFO
    logging.getLogger('pymongo').setLevel(logging.WARNING)
