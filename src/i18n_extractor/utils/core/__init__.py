"""Core utilities without internal dependencies."""
