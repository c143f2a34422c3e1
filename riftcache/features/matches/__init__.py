"""Cached match artifacts, participant statistics and sync metadata."""
