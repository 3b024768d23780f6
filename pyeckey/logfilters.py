"""
Logging filters splitting console output into INFO records (printed plain)
and everything else (printed with the level name)
"""
import logging

class NoInfoFilter(logging.Filter):
    """Drops INFO records, keeps every other level"""
    def filter(self, record):
        return record.levelno != logging.INFO

class OnlyInfoFilter(logging.Filter):
    """Keeps INFO records only"""
    def filter(self, record):
        return record.levelno == logging.INFO
