"""Internal utilities shared across tack modules."""
