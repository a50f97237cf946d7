"""
Infrastructure Package
======================

Event bus backends (Redis pub/sub, in-memory) and the service container
that wires the marketplace services to them.
"""
