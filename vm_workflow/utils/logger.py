"""
VM Workflow - Logging Setup

Sets up the 'vm_workflow' logger used by the engine, providers and CLI.

Logging Strategy:
- INFO (default): Step-by-step progress for end users
- DEBUG (--verbosity debug): API calls, responses and step timings
- WARNING: Rollback entries that were skipped or resources left behind
- ERROR: The failing step and every compensation failure
- CRITICAL: Rollback itself failed, manual cleanup is needed
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any

LOGGER_NAME = 'vm_workflow'


class CleanFormatter(logging.Formatter):
    """
    Formatter for user-facing console output.

    - INFO: Just the message
    - WARNING/ERROR/CRITICAL: Prefixed so they stand out
    """

    def format(self, record):
        if record.levelno == logging.INFO:
            return record.getMessage()

        elif record.levelno == logging.WARNING:
            return f"[!] WARNING: {record.getMessage()}"

        elif record.levelno == logging.ERROR:
            return f"[X] ERROR: {record.getMessage()}"

        elif record.levelno == logging.CRITICAL:
            return f"[!!] CRITICAL: {record.getMessage()}"

        else:
            return f"[DEBUG] {record.getMessage()}"


def setup_logging(level='INFO', log_file=None, debug=False):
    """
    Setup logging for VM Workflow.

    Configures the package logger to:
    1. Output to console (stdout)
    2. Optionally write to a log file with full detail

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only logs to console.
        debug: If True, use DEBUG level and detailed console format

    Returns:
        logging.Logger: Configured logger instance

    Example:
        logger = setup_logging('INFO')
        logger.info("Creating resource group...")

        logger = setup_logging(debug=True)
        logger.debug("API call: compute.disks().insert(...)")
    """
    if debug:
        level = 'DEBUG'

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # setup_logging may be called more than once per process
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    if debug:
        # [2026-01-02 10:30:45] DEBUG [_execute_one:210]: Starting operation: vm
        console_format = logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(funcName)s:%(lineno)d]: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        console_format = CleanFormatter('%(message)s', datefmt='%Y-%m-%d %H:%M:%S')

    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

        logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger():
    """
    Get the VM Workflow logger instance.

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(LOGGER_NAME)


# Debug logging helpers

def log_api_call(logger, method_name: str, **params):
    """
    Log an API call (DEBUG level).

    Example:
        log_api_call(logger, 'disks.insert', project='my-project', zone='us-central1-a', disk='dsk-abc')
        # Output: API call: disks.insert(project=my-project, zone=us-central1-a, disk=dsk-abc)
    """
    param_str = ', '.join(f'{k}={v}' for k, v in params.items())
    logger.debug(f"API call: {method_name}({param_str})")


def log_api_response(logger, response: Any, truncate: int = 200):
    """
    Log an API response (DEBUG level), truncated to `truncate` characters.
    """
    response_str = str(response)
    if len(response_str) > truncate:
        response_str = response_str[:truncate] + '...'
    logger.debug(f"API response: {response_str}")


def log_operation_start(logger, operation_name: str):
    """
    Log the start of an operation (DEBUG level).

    Returns:
        float: Start time (for use with log_operation_end)

    Example:
        start_time = log_operation_start(logger, 'vm')
        # ... do operation ...
        log_operation_end(logger, 'vm', start_time)
    """
    logger.debug(f"Starting operation: {operation_name}")
    return time.time()


def log_operation_end(logger, operation_name: str, start_time: float):
    """Log the end of an operation with timing (DEBUG level)."""
    duration = time.time() - start_time
    logger.debug(f"Operation completed: {operation_name} (took {duration:.2f}s)")


def print_header(logger, title: str, char='=', length=60):
    """
    Print a formatted header (INFO level).

    Example:
        print_header(logger, 'VM Workflow - Walkthrough')
        # Output:
        # ============================================================
        # VM Workflow - Walkthrough
        # ============================================================
    """
    logger.info(char * length)
    logger.info(title)
    logger.info(char * length)
