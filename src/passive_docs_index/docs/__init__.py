"""Local documentation store (.mdx files under .claude-docs/)."""
