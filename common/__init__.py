"""
共通コンポーネントパッケージ
"""

from .file_handlers.csv_handler import CSVHandler
from .error_handling.exceptions import (
    FileProcessingError,
    DataValidationError,
    ConfigurationError,
    EncodingDetectionError
)
from .error_handling.error_handler import ErrorHandler
from .logging.unified_logger import UnifiedLogger
from .config.config_manager import ConfigManager
from .utils.encoding_detector import EncodingDetector
from .data_models import (
    ReportResult,
    ProcessingSummary
)

__all__ = [
    'CSVHandler',
    'FileProcessingError',
    'DataValidationError',
    'ConfigurationError',
    'EncodingDetectionError',
    'ErrorHandler',
    'UnifiedLogger',
    'ConfigManager',
    'EncodingDetector',
    'ReportResult',
    'ProcessingSummary'
]
