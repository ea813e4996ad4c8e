"""User account and statistics services."""
