# Number of cells along each side of the car in a stored density grid.
GRID_CELLS = 10

# Intensities are stored with two decimals (Numeric(3, 2) column).
INTENSITY_DECIMALS = 2

CSV_TIMESTAMP = "timestamp"
CSV_X = "x"
CSV_Y = "y"
CSV_Z = "z"
CSV_FIELDS = (CSV_TIMESTAMP, CSV_X, CSV_Y, CSV_Z)

APP_NAME = "heatmap_recorder"
