from __future__ import annotations

import logging

from . import create_app

logger = logging.getLogger(__name__)


def run() -> None:
    app = create_app()
    host = app.config["API_HOST"]
    port = app.config["API_PORT"]
    logger.info("API escuchando en http://%s:%s", host, port)
    app.run(host=host, port=port, debug=app.config["DEBUG"])


if __name__ == "__main__":
    run()
