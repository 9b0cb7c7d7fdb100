"""Adapters - database and identity provider integrations."""
