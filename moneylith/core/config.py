"""Engine settings for Moneylith.

The tunables below are policy choices, not derived constants. Defaults
must stay as they are to keep results comparable across versions.
"""

import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field, ValidationError

from moneylith.core.exceptions import ConfigurationError

ENV_PREFIX = "MONEYLITH_"


class EngineSettings(BaseModel):
    """Tunable constants used by the calculation engine.

    Attributes:
        recurring_stddev_ratio: A transaction group is recurring when its
            population stddev is at most this fraction of its mean amount.
        bucket_window_months: Default lookback window for bucket derivation.
        max_simulation_months: Hard cap on simulated payoff months.
        sample_transaction_limit: Number of transaction ids kept per bucket.
        log_level: Level passed to setup_logging by the CLI.
    """

    recurring_stddev_ratio: Annotated[Decimal, Field(ge=0)] = Decimal("0.2")
    bucket_window_months: int = Field(default=6, ge=1)
    max_simulation_months: int = Field(default=600, ge=1)
    sample_transaction_limit: int = Field(default=5, ge=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Create settings from MONEYLITH_* environment variables.

        Unset variables keep their defaults.
        """
        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid environment settings: {e}") from e


DEFAULT_SETTINGS = EngineSettings()


def load_settings(path: Path | None = None) -> EngineSettings:
    """Load engine settings.

    Reads a JSON object from path when given, otherwise falls back to
    environment variables.

    Args:
        path: Optional JSON settings file.

    Returns:
        Validated EngineSettings.

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid.
    """
    if path is None:
        return EngineSettings.from_env()

    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Settings file is not valid JSON: {path}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain an object: {path}")

    try:
        return EngineSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}") from e
