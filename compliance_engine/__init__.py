"""Weighted compliance scoring and gap prioritization engine."""

__version__ = "1.0.0"
