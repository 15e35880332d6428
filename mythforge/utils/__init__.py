"""Utility modules for parsing, completion, and shared helpers."""
