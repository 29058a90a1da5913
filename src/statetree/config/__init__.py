"""Configuration module using Pydantic Settings.

Usage:
    from statetree.config import StoreSettings

    settings = StoreSettings(strict=True)
"""

from statetree.config.settings import StoreSettings

__all__ = [
    "StoreSettings",
]
