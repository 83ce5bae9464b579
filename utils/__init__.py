"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, to_utc, to_local, parse_timestamp
from utils.config import EngineConfig, load_config, configure_logging
