# ------------------------------------------------------------------
# Type classification
# ------------------------------------------------------------------
# Winning candidate below this ratio falls back to text
MIN_CONFIDENCE = 0.7

# Winning candidate below this ratio gets a "needs review" note
REVIEW_CONFIDENCE = 0.9

# Any column below this ratio sends the upload to pending_adjustment
ADJUSTMENT_CONFIDENCE = 0.8

# ------------------------------------------------------------------
# Sampling
# ------------------------------------------------------------------
SAMPLE_SIZE = 100
PREVIEW_ROWS = 5
SAMPLE_VALUES_LIMIT = 5

# ------------------------------------------------------------------
# Integrity
# ------------------------------------------------------------------
SPARSE_ROW_THRESHOLD = 0.5

# Cell markers counted as empty by the integrity check only
EMPTY_MARKERS = {"", "null", "undefined"}

# ------------------------------------------------------------------
# Upload limits / persistence
# ------------------------------------------------------------------
MAX_FILE_SIZE = 100 * 1024 * 1024
ROW_BATCH_SIZE = 1000
