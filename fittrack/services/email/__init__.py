"""Email delivery services."""
