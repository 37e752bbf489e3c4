"""Outbound SMTP mail."""
