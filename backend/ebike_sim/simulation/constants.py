"""
Physical constants and fixed simulation parameters.
"""

GRAVITY = 9.81  # m/s²
AIR_DENSITY = 1.225  # kg/m³ at sea level
DRAG_COEFFICIENT = 0.9  # upright rider
FRONTAL_AREA_M2 = 0.5
ROLLING_RESISTANCE_COEFFICIENT = 0.01

# Share of battery power that reaches the wheel
DRIVETRAIN_EFFICIENCY = 0.8

# Integrator guards
MIN_SPEED_FOR_FORCE_MPS = 0.1
STANDSTILL_SPEED_MPS = 0.01
MAX_ACCELERATION_MPS2 = 5.0

# Early stop heuristics
EQUILIBRIUM_ACCELERATION_MPS2 = 0.01
EQUILIBRIUM_WARMUP_S = 5.0
EQUILIBRIUM_MIN_SPEED_MPS = 1.0
STALL_SPEED_MPS = 0.1
STALL_GRACE_S = 10.0

# Wind effect clamp (%)
WIND_EFFECT_MIN_PERCENT = -50.0
WIND_EFFECT_MAX_PERCENT = 100.0

# Scenario parameters
DEFAULT_TIME_STEP_S = 0.1
ACCELERATION_TEST_HORIZON_S = 30.0
ACCELERATION_TEST_STEP_S = 0.05
RANGE_TEST_HORIZON_S = 3600.0 * 5
RANGE_TEST_STEP_S = 1.0
THROTTLE_PROBE_HORIZON_S = 60.0
THROTTLE_PROBE_STEP_S = 0.1
MIN_THROTTLE = 0.1
MAX_THROTTLE_PROBES = 8
THROTTLE_SPEED_TOLERANCE_KMH = 0.5

# Battery
BATTERY_BASE_RESISTANCE_OHM = 0.05
BATTERY_DEFAULT_TEMPERATURE_C = 20.0
BATTERY_MIN_TEMPERATURE_C = -20.0
BATTERY_MAX_TEMPERATURE_C = 60.0
BATTERY_MIN_VOLTAGE_RATIO = 0.7
BATTERY_DEPLETED_SOC_PERCENT = 1.0

# Motor / controller
MOTOR_MAX_TEMPERATURE_C = 120.0
MOTOR_OVERHEAT_C = 80.0
CONTROLLER_DEFAULT_TEMPERATURE_C = 20.0
CONTROLLER_MAX_TEMPERATURE_C = 80.0
CONTROLLER_OVERHEAT_C = 70.0
