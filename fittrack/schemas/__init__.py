"""
Request schemas for FitTrack API.
"""
