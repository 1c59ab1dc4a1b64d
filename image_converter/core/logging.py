import logging
import sys
from .config import settings

# Configure logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Set up root logger
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

# Create loggers for different components
conversion_logger = logging.getLogger("conversion")
history_logger = logging.getLogger("history")
storage_logger = logging.getLogger("storage")


def log_conversion_event(
    original_name: str,
    converted_name: str,
    target_format: str,
    size: int,
):
    """Log a completed conversion."""
    conversion_logger.info(
        f"CONVERSION:OK | original={original_name} | converted={converted_name} "
        f"| format={target_format} | size={size}"
    )


def log_conversion_error(original_name: str, target_format: str, error: Exception):
    """Log conversion errors internally without exposing details to users."""
    conversion_logger.error(
        f"CONVERSION:FAILED | original={original_name} | format={target_format} | error={str(error)}",
        exc_info=True,
    )


def log_history_error(error: Exception):
    history_logger.error(f"HISTORY:FAILED | error={str(error)}", exc_info=True)


def log_deletion_error(record_id: str, error: Exception):
    """Log deletion errors internally without exposing details to users."""
    storage_logger.error(
        f"DELETE:FAILED | id={record_id} | error={str(error)}",
        exc_info=True,
    )
