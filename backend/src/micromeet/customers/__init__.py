"""Reusable customer records."""
