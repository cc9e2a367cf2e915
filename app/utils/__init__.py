"""Shared utilities for the Task Management API."""
