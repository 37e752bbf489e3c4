"""Document number preview and prefix configuration."""
