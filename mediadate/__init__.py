# mediadate
# A Python tool to reorganize media files by their capture date

from .models import (
    PartialDate, SegmentMatch, FileEntry, RunConfig, ProcessingStats,
    TimeSource, TimeTarget
)
from .exceptions import (
    ProcessingError, ValidationError, FileOperationError,
    MetadataReadError, MetadataWriteError, TemplateSyntaxError
)
from .date_format import DateFormat
from .template import compile_source_template, compile_target_template
from .aligner import align
from .date_merger import merge, inherit_time_of_day, guess_path_date
from .source_selector import select_time
from .renderer import TargetRenderer
from .path_validator import PathValidator
from .file_scanner import FileScanner
from .metadata import MetadataOracle
from .copier import Copier
from .logger import ProgressLogger, LogConfig, create_default_logger, get_default_log_file
from .processor import Processor

__all__ = [
    'PartialDate',
    'SegmentMatch',
    'FileEntry',
    'RunConfig',
    'ProcessingStats',
    'TimeSource',
    'TimeTarget',
    'ProcessingError',
    'ValidationError',
    'FileOperationError',
    'MetadataReadError',
    'MetadataWriteError',
    'TemplateSyntaxError',
    'DateFormat',
    'compile_source_template',
    'compile_target_template',
    'align',
    'merge',
    'inherit_time_of_day',
    'guess_path_date',
    'select_time',
    'TargetRenderer',
    'PathValidator',
    'FileScanner',
    'MetadataOracle',
    'Copier',
    'ProgressLogger',
    'LogConfig',
    'create_default_logger',
    'get_default_log_file',
    'Processor'
]
