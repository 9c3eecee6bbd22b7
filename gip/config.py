"""Session timing and limits.

Defaults match what the Model 1697 controller tolerates. Overrides can be
loaded from the ``[session]`` section of an ini file.
"""
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

logger = logging.getLogger(__name__)

HANDSHAKE_TIMEOUT_MS = 2000
STREAM_TIMEOUT_MS = 100
WRITE_TIMEOUT_MS = 1000
HANDSHAKE_ATTEMPTS = 5
POWER_SETTLE_DELAY = 0.5  # seconds
READ_SIZE = 64  # bytes, interrupt endpoint max packet size

CONFIG_SECTION = "session"


@dataclass(frozen=True)
class SessionConfig:
    """Timeouts and limits used by GipSession.

    Attributes:
        handshake_timeout_ms: Receive timeout while waiting for Announce frames
        stream_timeout_ms: Receive timeout per streaming loop iteration
        write_timeout_ms: Timeout for every outbound transfer
        handshake_attempts: Maximum number of handshake reads
        power_settle_delay: Seconds to wait after Power-on before streaming
        read_size: Maximum bytes requested per receive
    """
    handshake_timeout_ms: int = HANDSHAKE_TIMEOUT_MS
    stream_timeout_ms: int = STREAM_TIMEOUT_MS
    write_timeout_ms: int = WRITE_TIMEOUT_MS
    handshake_attempts: int = HANDSHAKE_ATTEMPTS
    power_settle_delay: float = POWER_SETTLE_DELAY
    read_size: int = READ_SIZE

    def to_dict(self) -> Dict:
        """Convert to plain dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> SessionConfig:
        """Build from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for name, value in data.items():
            if name not in known:
                logger.warning(f"Ignoring unknown session option: {name}")
                continue
            values[name] = float(value) if name == "power_settle_delay" else int(value)
        return cls(**values)

    @classmethod
    def from_ini(cls, path: Optional[str]) -> SessionConfig:
        """Load overrides from an ini file.

        Missing file, section or keys fall back to the defaults.

        Args:
            path: Path to the ini file, or None for defaults

        Returns:
            SessionConfig instance
        """
        if not path or not os.path.exists(path):
            return cls()

        parser = configparser.ConfigParser()
        parser.read(path)

        if not parser.has_section(CONFIG_SECTION):
            return cls()

        return cls.from_dict(dict(parser.items(CONFIG_SECTION)))
