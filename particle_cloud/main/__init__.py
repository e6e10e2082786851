"""
Main module - Composition Root Layer

Loads settings and assembles the gateway and use cases through the
dependency container.
"""

from .config import AppSettings, LoggingSettings, ParticleSettings, get_settings
from .container import AppContainer, get_container, init_container

__all__ = [
    "AppSettings",
    "ParticleSettings",
    "LoggingSettings",
    "get_settings",
    "AppContainer",
    "init_container",
    "get_container",
]
