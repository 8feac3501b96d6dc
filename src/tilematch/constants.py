GRID_COLUMNS = 6
GRID_ROWS = 5

# Runs shorter than this are never reported as clusters.
MIN_RUN_LENGTH = 3

# Fewer colors than this make 3+ runs unavoidable or impossible to resolve cleanly.
MIN_PALETTE_SIZE = 4

# Board generation retries before giving up with UnsolvableConfiguration.
DEFAULT_MAX_ATTEMPTS = 200

DEFAULT_PALETTE = (
    'red',
    'green',
    'blue',
    'yellow',
    'magenta',
    'cyan',
)
