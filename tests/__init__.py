"""
Test suite for vault-engine

Contains:
- tests/unit/          : Unit tests for individual modules and end-to-end simulation
"""
