"""API Key Manager — per-user storage for API keys and tokens.

A small authenticated CRUD service. Callers sign in with Google, and
every key record they store is scoped to their Google subject id.
"""

__version__ = "2.0.0"
