"""HTTP facade."""
