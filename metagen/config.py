"""Watch session configuration."""

import json
from dataclasses import dataclass
from pathlib import Path

DEFAULT_QUIET_PERIOD_MS = 1000


@dataclass
class WatchConfig:
    quiet_period_ms: int = DEFAULT_QUIET_PERIOD_MS
    log_level: str = "INFO"

    CONFIG_PATH = Path.home() / ".metagen" / "config.json"

    @property
    def quiet_period(self) -> float:
        """Quiet period in seconds."""
        return self.quiet_period_ms / 1000

    @classmethod
    def load(cls, config_path: Path | None = None) -> "WatchConfig":
        config_path = config_path or cls.CONFIG_PATH
        if config_path.exists():
            data = json.loads(config_path.read_text(encoding="utf-8"))
            return cls._from_dict(data)
        return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "WatchConfig":
        return cls(
            quiet_period_ms=int(data.get("quiet_period_ms", DEFAULT_QUIET_PERIOD_MS)),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )
