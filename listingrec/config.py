"""Service configuration.

Settings are read from ``LISTINGREC_*`` environment variables with defaults
suitable for local development.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from listingrec.recommender.sampler import DEFAULT_HARD_CAP

ENV_PREFIX = "LISTINGREC_"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ServiceConfig:
    """Configuration for the ListingRec service.

    Attributes:
        data_dir: Directory holding the catalog CSV files.
        snapshot_dir: Directory holding a joblib catalog snapshot. Used in
            preference to the CSV files when a snapshot exists.
        log_level: Root logging level.
        json_logs: Emit JSON log lines when True.
        hard_cap: Largest recommendation set ever returned.
    """

    data_dir: str = "data"
    snapshot_dir: str = "models"
    log_level: str = "INFO"
    json_logs: bool = True
    hard_cap: int = DEFAULT_HARD_CAP

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
        if self.hard_cap <= 0:
            raise ValueError(f"hard_cap must be positive, got {self.hard_cap}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """Build a config from environment variables.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        hard_cap_raw = env.get(f"{ENV_PREFIX}HARD_CAP")
        try:
            hard_cap = int(hard_cap_raw) if hard_cap_raw else defaults.hard_cap
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}HARD_CAP must be an integer, got {hard_cap_raw!r}")

        json_logs_raw = env.get(f"{ENV_PREFIX}JSON_LOGS")
        if json_logs_raw is None:
            json_logs = defaults.json_logs
        elif json_logs_raw.lower() in TRUE_VALUES:
            json_logs = True
        elif json_logs_raw.lower() in FALSE_VALUES:
            json_logs = False
        else:
            raise ValueError(f"{ENV_PREFIX}JSON_LOGS must be a boolean, got {json_logs_raw!r}")

        return cls(
            data_dir=env.get(f"{ENV_PREFIX}DATA_DIR", defaults.data_dir),
            snapshot_dir=env.get(f"{ENV_PREFIX}SNAPSHOT_DIR", defaults.snapshot_dir),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level),
            json_logs=json_logs,
            hard_cap=hard_cap,
        )
