"""Body measurement services."""
