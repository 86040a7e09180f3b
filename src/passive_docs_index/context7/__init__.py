"""Context7 documentation fetching over HTTP, with mcp-cli as a fallback."""
