import os
# Constants used across multiple applications.
# The *_STATUSES and ISSUE_SEVERITIES tuples are enforced by CHECK constraints.

LOG_FILES_FOLDER = os.environ.get("HEATMAP_LOG_FOLDER", "/var/log/heatmap")
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DB_HOST = os.environ.get("HEATMAP_DB_HOST", "localhost:5432")
DB_CONNECTION = os.environ.get(
    "HEATMAP_DB_CONNECTION",
    "postgresql://usr:pass@{host}/backreportdb".format(host=DB_HOST),
)

CONFIG_FILE_NAME = os.environ.get("HEATMAP_CONFIG_FILE_NAME", "/etc/heatmap/config.json")
CONFIG_ELEVATOR = 'elevator'
CONFIG_TECHNICIAN = 'technician'
CONFIG_TIMEZONE = 'timezone'

# pytz zone name used when showing trajectory times to people.
LOCAL_TIMEZONE = os.environ.get("HEATMAP_TIMEZONE", "UTC")

DEFAULT_ELEVATOR_CODE = 'ELV-001'
DEFAULT_TECHNICIAN = 'technician'

SESSION_STATUS_IN_PROGRESS = 'in_progress'
SESSION_STATUS_COMPLETED = 'completed'
SESSION_STATUS_CANCELLED = 'cancelled'
SESSION_STATUSES = (SESSION_STATUS_IN_PROGRESS, SESSION_STATUS_COMPLETED, SESSION_STATUS_CANCELLED)

ELEVATOR_STATUS_ACTIVE = 'active'
ELEVATOR_STATUS_MAINTENANCE = 'maintenance'
ELEVATOR_STATUS_INACTIVE = 'inactive'
ELEVATOR_STATUSES = (ELEVATOR_STATUS_ACTIVE, ELEVATOR_STATUS_MAINTENANCE, ELEVATOR_STATUS_INACTIVE)

ISSUE_STATUS_OPEN = 'open'
ISSUE_STATUS_IN_PROGRESS = 'in_progress'
ISSUE_STATUS_RESOLVED = 'resolved'
ISSUE_STATUS_CLOSED = 'closed'
ISSUE_STATUSES = (
    ISSUE_STATUS_OPEN, ISSUE_STATUS_IN_PROGRESS, ISSUE_STATUS_RESOLVED, ISSUE_STATUS_CLOSED
)

ISSUE_SEVERITY_CRITICAL = 'critical'
ISSUE_SEVERITY_HIGH = 'high'
ISSUE_SEVERITY_MEDIUM = 'medium'
ISSUE_SEVERITY_LOW = 'low'
ISSUE_SEVERITIES = (
    ISSUE_SEVERITY_CRITICAL, ISSUE_SEVERITY_HIGH, ISSUE_SEVERITY_MEDIUM, ISSUE_SEVERITY_LOW
)

# Keys of the JSON blob stored in heatmap_snapshots.heatmap_data
SNAPSHOT_JSON_FLOOR_NAME = 'floor_name'
SNAPSHOT_JSON_POINTS = 'points'
SNAPSHOT_JSON_GRID = 'grid'
SNAPSHOT_JSON_GRID_CELLS = 'grid_cells'
