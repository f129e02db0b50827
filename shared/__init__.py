"""
Reflector Shared Module
=======================

Configuration management and structured logging shared by every
component of the reflection bridge.
"""

from shared.config import AppConfig, get_config

__all__ = ["AppConfig", "get_config"]
