"""Player identity records."""
