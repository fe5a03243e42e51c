"""
Configuration module for the HLM engine.
"""
from .settings import EngineSettings, get_settings

__all__ = [
    'EngineSettings',
    'get_settings',
]
