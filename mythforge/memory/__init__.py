"""Data models and static content tables for mythology responses."""
