"""Sectioned CV builder: document model, templates, autosave and export."""

__version__ = "0.1.0"
