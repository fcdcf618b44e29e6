"""Core: domain, contracts, configuration and the relabeling services."""
