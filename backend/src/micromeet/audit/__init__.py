"""Immutable audit trail for security-relevant events."""
