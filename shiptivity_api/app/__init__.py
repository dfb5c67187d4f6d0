"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (settings, logging, database), ``schemas``,
``services`` and the versioned ``api`` routers.
"""

from .main import app  # noqa: F401
