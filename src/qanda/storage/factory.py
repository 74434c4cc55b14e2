"""
Module: factory.py
Description: Backend selection for the storage layer.

The backend is chosen once, from settings, when the process first needs
a store; the same instance then serves every request.

Key Components:
- build_store(): Construct the backend named by settings.storage_backend
- get_store(): Process-wide cached store (FastAPI dependency)
"""

from functools import lru_cache
from typing import Optional

from qanda.config.settings import Settings, settings as default_settings
from qanda.storage.base import QuestionStore
from qanda.utils.logger import get_logger

logger = get_logger(__name__)


def build_store(config: Optional[Settings] = None) -> QuestionStore:
    """
    Build the storage backend described by config.

    Args:
        config: Settings to use; the global settings when omitted

    Returns:
        LocalStore seeded from the fixture, or DynamoDBStore
    """
    config = config or default_settings

    if config.storage_backend == "dynamodb":
        from qanda.storage.dynamodb import DynamoDBStore
        store = DynamoDBStore(
            events_table_name=config.events_table_name,
            questions_table_name=config.questions_table_name,
            region_name=config.aws_region,
            endpoint_url=config.dynamodb_endpoint_url,
            toggle_max_attempts=config.toggle_max_attempts
        )
    else:
        from qanda.storage.local import LocalStore
        store = LocalStore.from_fixture(config.seed_fixture)

    logger.info("Storage backend selected", backend=store.backend_name, stage=config.stage)
    return store


@lru_cache(maxsize=1)
def get_store() -> QuestionStore:
    """Return the process-wide store, building it on first use."""
    return build_store()
