"""Logging and concurrency utilities."""
