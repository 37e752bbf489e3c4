"""Reusable terms and conditions."""
