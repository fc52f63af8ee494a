"""Centralized constants for spike-studio."""

# Identifier prefixes; both brands synthesize the same content, strike adds a tag
GEN_PREFIX = "gen-"
STRIKE_PREFIX = "strike-"
GENERATED_PREFIXES = (STRIKE_PREFIX, GEN_PREFIX)

# Override definition file extensions, in lookup order
SPIKE_FILE_EXTS = (".json", ".yaml", ".yml")


class Limits:
    CACHE_MAX_SIZE = 50
    CACHE_TTL_SECONDS = 300.0
    AUTO_TOP = 5
    AUTO_BATCH_MULTIPLIER = 10
    GENERATED_LIMIT = 2000
    DISCOVER_PAGE = 20
    LIST_PREVIEW = 50
    STATS_SAMPLE = 20
    MAX_SPIKE_FILE_SIZE = 1024 * 1024


class Scoring:
    ALIAS_BOOST = 1.0
    CONFIDENCE_THRESHOLD = 0.4
    COVERAGE_FLOOR = 0.1
