"""유틸리티"""

from .logger import setup_logger, set_log_level, logger
from .settings import CorrelationSettings

__all__ = ['setup_logger', 'set_log_level', 'logger', 'CorrelationSettings']
