"""Static investment track catalog loading."""
