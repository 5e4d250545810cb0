"""Publish an Obsidian-style markdown vault as standard.site documents."""

__version__ = "0.1.0"
