"""Compressed docs index embedded in CLAUDE.md.

The index block is demarcated:
    <!-- pdi:begin -->
    [Framework Docs]|root:.claude-docs/frameworks
    |CRITICAL:...
    |hono@4.x|api:{app.mdx,routing.mdx}|patterns:{validation.mdx}
    <!-- pdi:end -->

optionally followed by an ``<!-- MCP Fallback: ... -->`` comment that is
treated as part of the block. Anything outside is preserved untouched.
"""

# Marker constants used by the codec and the CLAUDE.md splice
BEGIN_MARKER = "<!-- pdi:begin -->"
END_MARKER = "<!-- pdi:end -->"
MCP_FALLBACK_PREFIX = "<!-- MCP Fallback: Context7 for expanded queries"
