"""Request builders and response parsers for token server endpoints."""
