"""Feature modules for each cached entity family."""
