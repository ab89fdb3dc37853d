"""Transport clients for remote services."""
