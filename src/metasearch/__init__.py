"""metasearch - privacy-respecting metasearch aggregator."""

__version__ = "0.1.0"
