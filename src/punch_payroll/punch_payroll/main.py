from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_DEVICE_ID
from .database.bootstrap import apply_schema, list_tables

# Shipped inside the package so an installed wheel can still bootstrap the database.
SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"

logger = logging.getLogger(__name__)


def load_settings() -> ModuleType:
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def configure_logging(settings: ModuleType) -> None:
    level_name = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_container(settings: Optional[ModuleType] = None) -> Container:
    settings = settings or load_settings()
    configure_logging(settings)

    db_config = getattr(settings, "DB_CONFIG")
    if getattr(settings, "DEBUG", False):
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    return build_container(
        db_config=db_config,
        timezone=getattr(settings, "TIMEZONE", None),
        default_device_id=getattr(settings, "DEFAULT_DEVICE_ID", DEFAULT_DEVICE_ID),
    )
