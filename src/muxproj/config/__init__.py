"""Configuration management module."""

from .loader import MuxprojSettings, load_settings
from .locator import ConfigLocator

__all__ = ["ConfigLocator", "MuxprojSettings", "load_settings"]
