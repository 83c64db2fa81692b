"""Potion records: payload schema and collection access."""
