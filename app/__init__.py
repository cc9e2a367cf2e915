"""Task Management API."""
