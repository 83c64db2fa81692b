"""Aggregate analytics over the potions collection."""
