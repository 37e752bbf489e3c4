"""Letterhead details per organization."""
