"""Bank accounts printed on invoices."""
