# main.py
"""
Entry point: configures logging, verifies the schema and serves the app.
"""
import logging

import config
from app import app, socketio
from database.setup import create_tables

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Initializing and verifying database schema...")
    create_tables()
    logger.info("Serving AquaSure on %s:%s", config.HOST, config.PORT)
    socketio.run(app, host=config.HOST, port=config.PORT)


# === Entry point ===
if __name__ == "__main__":
    main()
