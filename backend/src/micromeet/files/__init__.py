"""Presigned file upload and download."""
