"""
Configuration module for Texify.
"""
from .constants import *
from .logging_config import setup_logger, get_logger, configure_from_settings
from .settings import Settings, settings

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    'configure_from_settings',
    # Settings
    'Settings',
    'settings',
    # Constants (all exported via *)
]
