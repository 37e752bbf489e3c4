"""Sending invoices, purchase orders and receipts by email."""
