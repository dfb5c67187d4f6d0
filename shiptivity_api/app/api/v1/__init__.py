"""
Version 1 of the API.

Breaking changes to the clients API should be introduced in a new
version subpackage (e.g. ``v2``) to preserve backwards compatibility.
"""
