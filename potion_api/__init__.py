"""Potion API - Backend.

A small REST service over a single MongoDB `potions` collection:
- CRUD endpoints for potions
- aggregate analytics (grouped averages, counts, ratios)
- username/password auth with a signed session cookie

See README.md for setup and usage.
"""

__all__ = ["__version__"]

__version__ = "1.0.0"
