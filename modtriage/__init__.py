# modtriage/__init__.py

"""Triage mod archives into content and infrastructure/library by their internal layout."""

__version__ = "0.1.0"
