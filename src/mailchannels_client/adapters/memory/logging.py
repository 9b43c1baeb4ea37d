"""In-memory logging adapter for testing.

Validates the ``[lib_log_rich]`` section exactly like the production
initializer but never starts the lib_log_rich runtime, so tests keep
stdlib logging (and ``caplog``) untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from lib_layered_config import Config

from ..logging.setup import LoggingConfigModel


def init_logging_in_memory(config: Config) -> None:
    """Check the logging section without side effects.

    Raises:
        pydantic.ValidationError: When the ``[lib_log_rich]`` section is malformed.

    Example:
        >>> init_logging_in_memory(Config({"lib_log_rich": {"environment": "test"}}, {}))
    """
    section: object = config.get("lib_log_rich", default={})
    if isinstance(section, Mapping):
        LoggingConfigModel.model_validate(dict(cast(Mapping[str, Any], section)))
    else:
        LoggingConfigModel.model_validate(section)


__all__ = ["init_logging_in_memory"]
