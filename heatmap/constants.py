# Physical model of the elevator being surveyed.
FLOOR_HEIGHT = 3  # Units of meters per floor
CAR_WIDTH = 1.5  # Units of meters (1.5m x 1.5m square car)
CAR_DEPTH = 1.5

# Floor 0 is the car top / machine room entry level, 1-12 are building floors.
MIN_FLOOR = 0
MAX_FLOOR = 12

# Vertical accelerations smaller than this are treated as noise.
VERTICAL_THRESHOLD = 0.5  # Units of m/s^2
# Fixed integration window used to turn one acceleration reading into a distance.
# This is not the time between samples.
FLOOR_TRANSITION_TIME_MS = 500  # Units of milliseconds

# Sample magnitude which maps to full heat map intensity.
INTENSITY_SCALE = 2  # Units of m/s^2

FLOOR_NAME_CAR_TOP = "Car Top (Machine Room)"
FLOOR_NAME_FORMAT = "Floor {0}"
FLOOR_NAME_UNKNOWN = "Unknown"

PATH_TIME_FORMAT = "%H:%M:%S"
