"""Feature flag utilities."""
