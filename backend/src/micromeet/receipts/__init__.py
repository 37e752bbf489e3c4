"""Receipts (kwitansi)."""
