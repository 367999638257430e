"""Monitor configuration: env-driven via pydantic-settings.

Reads from a .env file and DELEGATEWATCH_* environment variables.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class MonitorSettings(BaseSettings):
    """Monitor settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export DELEGATEWATCH_PEER_URL=http://node.example:7000
        export DELEGATEWATCH_INTERVAL_SECONDS=5
        export DELEGATEWATCH_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DELEGATEWATCH_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Peer
    peer_url: str = "http://localhost:7000"
    request_timeout_seconds: float = 10.0
    roster_limit: int = 101
    blocks_limit: int = 100

    # Loop
    interval_seconds: float = 2.0


# Module-level singleton: import as `from delegatewatch.config import settings`
settings = MonitorSettings()
