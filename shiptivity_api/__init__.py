"""
Top-level package for the Shiptivity API.

Allows modules within ``app`` to be imported using fully qualified
names like ``shiptivity_api.app.main``.  All functionality lives in
submodules under ``app``.
"""

__all__ = []
