"""
Environment-driven settings for smtref.

Variables:
    SMTREF_CONTEXT_PARAMS: comma separated ``key=value`` engine parameters
        applied to contexts created with ``new_context()``.
    SMTREF_LOG_LEVEL: level name used by ``setup_logging()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
import os

ENV_CONTEXT_PARAMS = "SMTREF_CONTEXT_PARAMS"
ENV_LOG_LEVEL = "SMTREF_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Settings resolved from the environment.

    Attributes:
        context_params: Engine parameters for new contexts
        log_level: Logging level name
    """
    context_params: Dict[str, str] = field(default_factory=dict)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Raises:
            ValueError: If a parameter entry or the log level is malformed
        """
        env = os.environ if environ is None else environ

        params = parse_params(env.get(ENV_CONTEXT_PARAMS, ""))

        level = env.get(ENV_LOG_LEVEL, "WARNING").strip().upper() or "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level in ${ENV_LOG_LEVEL}: {level}")

        return cls(context_params=params, log_level=level)


def parse_params(text: str) -> Dict[str, str]:
    """Parse ``key=value,key=value`` into a dict. Blank entries are skipped."""
    params: Dict[str, str] = {}
    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Malformed context parameter: '{entry}'")
        params[key] = value.strip()
    return params


def get_settings() -> Settings:
    """Return settings for the current process environment."""
    return Settings.from_env()
