"""Cascade sibling projects in dependency order.

Provides CLI interface for cascades:
- run: Pull every sibling in dependency order (verify / commit / push / PR)
- graph: Show discovered siblings, their dependencies and the walk order
"""
