"""Short-TTL ranked standing snapshots."""
