import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configures the root logger once for the API process and scripts."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Tortoise is chatty at DEBUG (every SQL statement)
    logging.getLogger("tortoise").setLevel(logging.INFO)
