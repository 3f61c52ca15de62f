"""Semantic property domain: model, validation, formatting and reconciliation."""
