"""Workout logging services."""
