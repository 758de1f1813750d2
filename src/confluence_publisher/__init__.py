"""Publish a rendered documentation tree into a Confluence space."""

__version__ = "0.1.0"
