"""Source and catalog parsers."""
