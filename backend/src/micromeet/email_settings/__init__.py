"""Per-organization SMTP account settings."""
