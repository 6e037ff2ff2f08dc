"""Contest platform backend package."""
