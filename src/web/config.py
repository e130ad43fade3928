"""
Server settings, overridable through environment variables.
"""
import os
from dataclasses import dataclass, field

from src.utils.constants import DISCONNECT_GRACE_SEC, ROOM_TTL_SEC, SWEEP_INTERVAL_SEC

# Frontend assets live next to the src package
DEFAULT_STATIC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "web")


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, default))


@dataclass
class Settings:
    host: str = field(default_factory=lambda: os.environ.get("TTT_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.environ.get("TTT_PORT", "8000")))
    room_ttl_sec: float = field(default_factory=lambda: _env_float("TTT_ROOM_TTL_SEC", ROOM_TTL_SEC))
    sweep_interval_sec: float = field(
        default_factory=lambda: _env_float("TTT_SWEEP_INTERVAL_SEC", SWEEP_INTERVAL_SEC)
    )
    disconnect_grace_sec: float = field(
        default_factory=lambda: _env_float("TTT_DISCONNECT_GRACE_SEC", DISCONNECT_GRACE_SEC)
    )
    static_dir: str = field(default_factory=lambda: os.environ.get("TTT_STATIC_DIR", DEFAULT_STATIC_DIR))
    log_level: str = field(default_factory=lambda: os.environ.get("TTT_LOG_LEVEL", "INFO"))
