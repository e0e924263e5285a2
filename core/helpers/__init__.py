"""
Helpers package for Daily Priority.

- metric_helpers: Streak, rate and bucket calculations
- cache_helpers: Per-user response caching
"""
