from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Logging configuration
LOG_LEVEL = config.get("PODCAST_TRACKER_LOG_LEVEL", "warning")
VERBOSE = config.get("PODCAST_TRACKER_VERBOSE", False)
# Append-mode debug log; empty disables file logging
DEBUG_LOG_FILE = config.get("PODCAST_TRACKER_DEBUG_LOG", "")

# CLI identity
PROGRAM_NAME = "podcast-tracker"
