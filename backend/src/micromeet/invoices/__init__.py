"""Sales invoices and the overdue sweep."""
