"""Resolver package for the GraphQL schema.

Daily point history and aggregation live in `daily_point`; user totals and
the leaderboard live in `user_summary`.
"""
