import logging

from core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None):
    """Configure the root logger once per process.

    Streamlit re-executes page scripts on every interaction, so repeated calls
    must not stack handlers.
    """
    global _configured
    if not _configured:
        logging.basicConfig(level=(level or LOG_LEVEL), format=LOG_FORMAT)
        _configured = True
    return logging.getLogger()
