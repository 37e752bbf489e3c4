"""Object storage for logos, signatures, stamps and profile images."""
