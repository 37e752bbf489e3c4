"""Invitations to join an organization."""
