"""Configuration module for Wasifu."""

from wasifu.config.loader import ConfigLoader
from wasifu.config.models import FlowSettings, Settings, WasifuConfig

__all__ = ["ConfigLoader", "FlowSettings", "Settings", "WasifuConfig"]
