"""
API routes.

- players: per-player stats, prediction, odds and comparison
- search: roster-based player search
"""
