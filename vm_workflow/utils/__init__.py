"""Utils package."""

from .logger import get_logger, setup_logging
from .naming import create_random_name
from .progress import ProgressTracker, SimpleProgressTracker, create_progress_tracker

__all__ = [
    'get_logger',
    'setup_logging',
    'create_random_name',
    'ProgressTracker',
    'SimpleProgressTracker',
    'create_progress_tracker'
]
