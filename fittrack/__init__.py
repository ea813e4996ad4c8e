"""
FitTrack application package.

Fitness tracking API: accounts, authentication, workouts, measurements,
and workout analytics on top of the shared `common` infrastructure.
"""

__version__ = "1.0.0"
