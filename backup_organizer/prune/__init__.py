"""Empty folder removal."""
