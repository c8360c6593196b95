from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level for the ``outage_admin`` logger tree.

    Uvicorn already configures handlers; this only controls our verbosity.
    Set ``OUTAGE_LOG_LEVEL=DEBUG`` (or INFO/WARNING/ERROR) to change it.
    """

    normalized = level.upper()
    logging.getLogger("outage_admin").setLevel(normalized)
    logging.getLogger("outage_admin").propagate = True
