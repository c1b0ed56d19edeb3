import math
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ebike_sim.simulation.constants import (
    AIR_DENSITY,
    CONTROLLER_OVERHEAT_C,
    DRAG_COEFFICIENT,
    DRIVETRAIN_EFFICIENCY,
    FRONTAL_AREA_M2,
    GRAVITY,
    MOTOR_OVERHEAT_C,
    ROLLING_RESISTANCE_COEFFICIENT,
)

# --- Input Parameters ---

class BikeSpecifications(BaseModel):
    model_config = ConfigDict(frozen=True)

    rider_weight_kg: float = Field(..., gt=0, description="Rider weight in kg")
    bike_weight_kg: float = Field(..., gt=0, description="Bike weight without drivetrain in kg")
    wheel_diameter_in: float = Field(26.0, gt=0, description="Wheel diameter in inches")
    desired_max_speed_kmh: float = Field(..., gt=0, description="Target top speed in km/h")
    desired_max_range_km: float = Field(..., gt=0, description="Target range in km")

    @property
    def total_weight_kg(self) -> float:
        """Rider + bike, excluding the drivetrain."""
        return self.rider_weight_kg + self.bike_weight_kg

    @property
    def wheel_diameter_m(self) -> float:
        return self.wheel_diameter_in * 0.0254

    @property
    def wheel_circumference_m(self) -> float:
        return math.pi * self.wheel_diameter_m

    def required_power(self, speed_kmh: float, grade_percent: float = 0.0, extra_mass_kg: float = 0.0) -> float:
        """
        Battery-side power (W) needed to hold ``speed_kmh`` on a grade.
        """
        mass = self.total_weight_kg + extra_mass_kg
        speed_ms = speed_kmh / 3.6
        rolling = ROLLING_RESISTANCE_COEFFICIENT * mass * GRAVITY
        air = 0.5 * AIR_DENSITY * DRAG_COEFFICIENT * FRONTAL_AREA_M2 * speed_ms ** 2
        grade = 0.0
        if grade_percent != 0:
            grade = mass * GRAVITY * math.sin(math.atan(grade_percent / 100.0))
        return (rolling + air + grade) * speed_ms / DRIVETRAIN_EFFICIENCY

    def wheel_rpm(self, speed_kmh: float) -> float:
        """Wheel speed in revolutions per minute."""
        return (speed_kmh / 3.6) / self.wheel_circumference_m * 60.0

    def clone(self) -> "BikeSpecifications":
        return self.model_copy()

# --- Output Results ---

class ThermalStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class ComponentType(str, Enum):
    MOTOR = "motor"
    CONTROLLER = "controller"
    BATTERY = "battery"


class SimulationData(BaseModel):
    """One sample of a ride."""
    time_s: float
    speed_kmh: float
    distance_km: float
    motor_temp_c: float
    controller_temp_c: float
    battery_temp_c: float
    battery_soc: float
    current_a: float
    power_w: float
    wind_effect: float = 0.0
    temp_effect: float = 0.0

    def is_motor_overheating(self) -> bool:
        return self.motor_temp_c > MOTOR_OVERHEAT_C

    def is_controller_overheating(self) -> bool:
        return self.controller_temp_c > CONTROLLER_OVERHEAT_C

    def instant_efficiency(self) -> float:
        """Meters per hour per watt; 0 when standing or coasting."""
        if self.power_w <= 0 or self.speed_kmh <= 0:
            return 0.0
        return self.speed_kmh * 1000.0 / (self.power_w + 0.0001)

    def thermal_status(self) -> ThermalStatus:
        if self.motor_temp_c > 100 or self.controller_temp_c > 80 or self.battery_temp_c > 50:
            return ThermalStatus.CRITICAL
        if self.motor_temp_c > 80 or self.controller_temp_c > 70 or self.battery_temp_c > 45:
            return ThermalStatus.WARNING
        return ThermalStatus.NORMAL

    def temperature_of(self, component: ComponentType) -> float:
        if component == ComponentType.MOTOR:
            return self.motor_temp_c
        if component == ComponentType.CONTROLLER:
            return self.controller_temp_c
        return self.battery_temp_c


class SimulationSummary(BaseModel):
    total_distance_km: float = 0.0
    total_time_s: float = 0.0
    max_speed_kmh: float = 0.0
    average_speed_kmh: float = 0.0
    average_power_w: float = 0.0
    peak_power_w: float = 0.0
    energy_consumed_wh: float = 0.0
    energy_efficiency_km_per_kwh: float = 0.0
    max_motor_temp_c: float = 0.0
    max_controller_temp_c: float = 0.0
    final_battery_temp_c: float = 0.0
    battery_depleted: bool = False
    wind_impact: float = 0.0
    temp_impact: float = 0.0
    normal_operating_time_s: float = 0.0
    warning_operating_time_s: float = 0.0
    critical_operating_time_s: float = 0.0

    def thermal_time_percentages(self) -> Tuple[float, float, float]:
        """(normal, warning, critical) share of operating time in %."""
        total = self.normal_operating_time_s + self.warning_operating_time_s + self.critical_operating_time_s
        if total <= 0:
            return (0.0, 0.0, 0.0)
        return (
            self.normal_operating_time_s / total * 100,
            self.warning_operating_time_s / total * 100,
            self.critical_operating_time_s / total * 100,
        )

# --- Validation ---

class ValidationResult(BaseModel):
    test_name: str
    passed: bool
    details: Dict[str, Any]

class ValidationReport(BaseModel):
    overall_score: float
    tests_passed: int
    total_tests: int
    results: List[ValidationResult]
    interpretation: str
