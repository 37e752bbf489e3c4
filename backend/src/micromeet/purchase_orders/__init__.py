"""Purchase orders sent to vendors."""
