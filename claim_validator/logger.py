import logging

from .config import settings

# Configure the logger
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(settings.LOG_FILE),  # Log to a file
        logging.StreamHandler(),  # Log to the console
    ],
)


# Create a logger instance
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
