"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "telemetry.log"


PathLike = Union[str, Path]

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class BusSettings:
    """Runtime settings for the telemetry bus."""

    buffer_size: int = 0  # per-subscriber buffer, 0 = unbounded
    log_records: bool = True  # attach LoggingConsumer on start
    log_level: str = "INFO"
    log_file: PathLike = DEFAULT_LOG_PATH


def resolve_log_path(env_value: PathLike | None = None) -> Path:
    """Resolve LOG_FILE to an absolute path."""
    if not env_value:
        return DEFAULT_LOG_PATH

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def load_settings() -> BusSettings:
    """Build BusSettings from environment variables."""
    raw_buffer = os.getenv("TELEMETRY_BUFFER_SIZE", "0")
    try:
        buffer_size = max(int(raw_buffer), 0)
    except ValueError:
        raise ValueError(f"TELEMETRY_BUFFER_SIZE must be an integer, got {raw_buffer!r}") from None

    log_records = os.getenv("TELEMETRY_LOG_RECORDS", "true").strip().lower() in _TRUE_VALUES

    return BusSettings(
        buffer_size=buffer_size,
        log_records=log_records,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=resolve_log_path(os.getenv("LOG_FILE")),
    )
