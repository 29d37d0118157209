"""Configuration for memeagent."""

from .settings import AgentSettings, get_settings, load_settings

__all__ = ["AgentSettings", "get_settings", "load_settings"]
