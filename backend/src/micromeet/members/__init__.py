"""Organization membership management."""
