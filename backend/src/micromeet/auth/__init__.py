"""Authentication: password hashing, session tokens and edge dependencies."""
