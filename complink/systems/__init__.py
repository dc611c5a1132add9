"""complink systems: filesystem-level storage."""
