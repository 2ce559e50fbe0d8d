from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from coaching_center.common.app_logger import setup_logging
from coaching_center.config import get_settings_module
from coaching_center.database.bootstrap import apply_schema, list_tables
from coaching_center.database.connection import DatabaseConnection, DBConfig
from coaching_center.main import SCHEMA_PATH

logger = logging.getLogger("coaching_center.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    config = DBConfig.from_mapping(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(config)

    apply_schema(conn, schema_path=SCHEMA_PATH)
    tables = list_tables(conn)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        config.user, config.host, config.port, config.database, len(tables),
    )


if __name__ == "__main__":
    main()
