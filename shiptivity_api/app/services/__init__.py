"""
Service layer.

``client_service`` is what the API handlers call; it validates input
and hands lane and priority changes to ``reorder_engine``, which works
against the ``rank_store`` abstraction rather than SQL directly.
"""
