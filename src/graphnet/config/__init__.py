"""Configuration: section models, settings resolution and logging setup."""

from graphnet.config.models import EventsSection, GraphConfig, GraphSection, MergeSection
from graphnet.config.settings import GraphSettings

__all__ = ["EventsSection", "GraphConfig", "GraphSection", "GraphSettings", "MergeSection"]
