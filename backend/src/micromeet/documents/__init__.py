"""Behaviour shared by invoices, purchase orders and receipts."""
