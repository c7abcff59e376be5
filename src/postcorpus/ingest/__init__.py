"""Source loading, splitting, parsing, validation and identity."""
