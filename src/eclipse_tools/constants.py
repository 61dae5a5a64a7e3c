"""Fixed constants: Earth model, solver limits, time units, geometry tolerances."""

# Earth model used by the observer reduction (NASA/Espenak convention)
EARTH_FLATTENING = 1.0 / 298.257
EARTH_ECCENTRICITY_SQ = 2.0 * EARTH_FLATTENING - EARTH_FLATTENING * EARTH_FLATTENING
EARTH_EQUATORIAL_RADIUS_M = 6378137.0

# Mean radius for haversine distances along the path
EARTH_MEAN_RADIUS_KM = 6371.0

# Seconds per radian of Earth rotation; deltaT / divisor gives the hour-angle shift in radians
DELTA_T_HOUR_ANGLE_DIVISOR = 13713.44

# Iterative solvers (mid-eclipse, C2/C3 refinement)
DEFAULT_MAX_ITERATIONS = 50
DEFAULT_TOLERANCE_HOURS = 1e-6

# Time: seconds per unit
SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0

# Geometry tolerances
INTERSECTION_EPSILON = 1e-12  # near-parallel edges in Sutherland-Hodgman
BAND_EPSILON = 1e-9  # longitude straddle test in band scans

# Defaults (configuration)
DEFAULT_MAX_STEP_KM = 20.0
DEFAULT_GRID_RESOLUTION = 0.25
DEFAULT_MAX_CLOUD = 100.0
SCORE_WEIGHT = 2.0
