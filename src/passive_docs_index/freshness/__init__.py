"""Documentation freshness: indexed versions vs. the npm registry."""

EXIT_CODES = {
    "SUCCESS": 0,
    "STALE": 1,
    "MISSING": 2,
    "ORPHANED": 3,
    "MIXED": 4,
    "NETWORK_ERROR": 5,
}

DEFAULT_STALE_DAYS = 30
