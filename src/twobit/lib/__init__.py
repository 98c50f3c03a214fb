"""Internal helpers shared by the codec modules."""
