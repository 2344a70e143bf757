"""
Core: rational arithmetic, immutable domain models and wire contracts.

Nothing here talks to the chain, a database or a transaction builder.
"""
