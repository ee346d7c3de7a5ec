"""Recipe file access."""
