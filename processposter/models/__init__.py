"""Data models exchanged with the Capture API."""
