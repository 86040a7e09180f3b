"""package.json reading and dependency detection."""
