"""Shared infrastructure: errors, logging, responses."""
