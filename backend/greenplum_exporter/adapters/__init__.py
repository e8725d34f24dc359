"""Adapters binding core protocols to concrete libraries."""
