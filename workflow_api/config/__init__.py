"""Configuration module for the workflow API."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
