"""Model Context Protocol request handling."""
