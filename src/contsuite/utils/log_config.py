import logging
import sys

def setup_logging(level=logging.INFO, format_string='%(asctime)s - %(name)s - %(levelname)s - %(message)s'):
    """Configures the package logger to write to stdout."""
    package_logger = logging.getLogger("contsuite")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)  # Explicitly set stream to stdout
        handler.setFormatter(logging.Formatter(format_string))
        package_logger.addHandler(handler)
    else:
        for handler in package_logger.handlers:
            handler.setFormatter(logging.Formatter(format_string))
    return package_logger

# Setup logging when this module is imported
setup_logging()

# Create a logger instance for other modules to import
logger = logging.getLogger("contsuite")
