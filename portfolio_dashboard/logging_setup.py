import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure application logging for the dashboard process.
    """
    logging.basicConfig(
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    level_value = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(level_value, int):
        level_value = logging.INFO
    # basicConfig is a no-op once handlers exist (Streamlit reruns), so set the level separately.
    logging.getLogger().setLevel(level_value)


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a namespaced logger.
    """
    return logging.getLogger(name)
