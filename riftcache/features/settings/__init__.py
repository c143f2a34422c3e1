"""Persisted key-value settings (API key, region)."""
