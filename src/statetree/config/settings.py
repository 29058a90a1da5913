"""Configuration settings using Pydantic Settings.

Provides typed store configuration with environment variable support.

Usage:
    from statetree.config import StoreSettings

    # Load from environment variables (STATETREE_*)
    settings = StoreSettings()

    # Or override with explicit values
    settings = StoreSettings(debug=False, strict=False)
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):  # type: ignore[misc]
    """Diagnostics configuration for stores.

    Attributes:
        debug: Development diagnostics. Reports unknown local types before
            delegating and reports direct assignment to ``store.state``.
            Disable for production to skip those checks.
        strict: Report state mutations made outside mutation handlers. Costs
            a deep copy of the state per commit; leave off in production.

    Environment Variables:
        STATETREE_DEBUG
        STATETREE_STRICT
    """

    model_config = SettingsConfigDict(
        env_prefix="STATETREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = True
    strict: bool = False
