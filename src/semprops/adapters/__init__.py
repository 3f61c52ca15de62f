"""Adapters implementing the semantic property ports."""
