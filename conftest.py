import logging
import os

# Same environment as test.py, set before utilities.common_constants is imported.
os.environ["HEATMAP_DB_CONNECTION"] = "sqlite:////tmp/heatmap_test.db"
os.environ["HEATMAP_CONFIG_FILE_NAME"] = "/tmp/heatmap_test_config.json"
os.environ["HEATMAP_LOG_FOLDER"] = "/tmp"
os.environ["HEATMAP_TIMEZONE"] = "UTC"

logging.disable(logging.CRITICAL)

# Shared helpers, not tests.
collect_ignore = ["utilities/test_utilities.py"]
