from __future__ import annotations

import logging
import sys

import uvicorn

from app.api.server import build_service, create_app
from app.config import SETTINGS
from app.domain.errors import StorageError
from app.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging()
    try:
        service = build_service(SETTINGS)
    except StorageError as exc:
        logger.critical("Cannot initialise task file: %s", exc)
        sys.exit(1)

    app = create_app(service, SETTINGS)

    logger.info("To-Do API running on http://%s:%s", SETTINGS.api_host, SETTINGS.api_port)
    logger.info("Tasks stored in: %s", SETTINGS.tasks_file)
    uvicorn.run(
        app,
        host=SETTINGS.api_host,
        port=SETTINGS.api_port,
        log_config=None,
        log_level=SETTINGS.log_level.lower(),
    )


if __name__ == "__main__":
    main()
