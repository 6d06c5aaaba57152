"""Game domain services: conflict resolution, turn order, scoring and the action queue.

This package contains pure(ish) domain logic that should be imported by
socket handlers, keeping transport concerns separated from core game
mechanics.
"""
