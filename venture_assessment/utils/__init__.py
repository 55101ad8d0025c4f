"""Utility modules for cooperative cancellation and retry with backoff."""
