"""Configuration module for convmd."""

from convmd.config.settings import (
    ConvmdSettings,
    JekyllConfig,
    RunConfig,
    WalkConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "ConvmdSettings",
    "JekyllConfig",
    "RunConfig",
    "WalkConfig",
    "get_settings",
    "reload_settings",
]
