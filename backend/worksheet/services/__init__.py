"""Worksheet domain services: question bank, leaderboard, quota, rate limiting,
the admission gate, and scoring.

Everything here is transport-agnostic. HTTP routes and socket handlers in
the parent package import these services and hold one instance of each per
app, keeping Flask concerns out of the core logic.
"""
