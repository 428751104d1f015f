"""Configuration settings for the League Leaderboard Analyzer."""

# Static data endpoints (relative to the data base URL)
DEFAULT_DATA_BASE_URL = "http://localhost:5173"
TOPICS_PATH = "/{league}_topics_raw.json"
SNAPSHOT_PATH = "/leaderboards/{slug}/{date}/{league}-{period}.json"
GLOBAL_SNAPSHOT_PATH = "/leaderboards/{league}_global/latest.json"

# Snapshot periods
PERIODS = ["7d", "30d", "tournament"]
TOPIC_SNAPSHOT_PERIODS = ["7d", "30d"]  # Per-topic files only exist for these
LOOKBACK_DAYS = 7  # Days probed backwards for the latest per-topic snapshot

# Rate limiting
REQUEST_TIMEOUT_SECONDS = 15
BATCH_SIZE = 10  # Parallel topic/period probes per batch
BATCH_DELAY_SECONDS = 0.2

# Ranking defaults
DEFAULT_TOP_LIMIT = 500
TOP_LIMIT_OPTIONS = [50, 100, 150, 200, 250, 300, 400, 500, 600, 700, 800, 900, 1000]
PAGE_SIZE = 30

# Farming index defaults
DEFAULT_TOP_CUTOFF = 50
TOP_CUTOFF_OPTIONS = [50, 100, 150, 200, 300, 400, 500, 1000]
DEFAULT_GOOD_RANK_THRESHOLD = 300
GOOD_RANK_OPTIONS = [100, 300, 500, 1000]

# Overlap analysis
OVERLAP_KEY_DELIMITER = " | "
MISSING_AVERAGE_RANK = 9999  # Average rank used for a period without entries
RATIO_SCALE = 100  # noise/signal ratio is expressed as a percentage
