#!/usr/bin/env python3
"""
Configuration management for the scoring web application.
"""

from functools import lru_cache
from pathlib import Path

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads from the project's config.yaml (if present) and applies
    environment variable overrides.

    Returns:
        AppConfig: The application configuration.
    """
    return load_config(str(get_project_root() / 'config.yaml'))


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent
