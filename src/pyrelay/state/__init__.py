"""State/cache layer.

This package holds the relay's snapshot of the producer's last known
state, which is replayed to consumers as they connect.
"""
