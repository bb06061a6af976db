"""REST API for metasearch."""
