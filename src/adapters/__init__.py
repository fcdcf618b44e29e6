"""Adapters: pure I/O (HTTP lookups, JSON files)."""
