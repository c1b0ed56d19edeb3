from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SafetyStatus(str, Enum):
    SAFE = "safe"
    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"


# Fraction of the rated current a wire may carry continuously
CONTINUOUS_RATING_FRACTION = 0.8


class Wire(BaseModel):
    """
    Copper conductor of a given AWG gauge. Stateless.
    """
    model_config = ConfigDict(frozen=True)

    awg: int = Field(..., description="American Wire Gauge")
    cross_section_mm2: float = Field(..., gt=0)
    max_current_a: float = Field(..., gt=0, description="Max continuous current")
    resistance_per_meter: float = Field(..., gt=0, description="Ohm per meter")

    def voltage_drop(self, current_a: float, length_m: float) -> float:
        return current_a * self.resistance_per_meter * length_m

    def power_loss(self, current_a: float, length_m: float) -> float:
        return self.voltage_drop(current_a, length_m) * current_a

    def efficiency(self, current_a: float, length_m: float, system_voltage_v: float) -> float:
        total_power = system_voltage_v * current_a
        if total_power <= 0:
            return 1.0
        return 1.0 - self.power_loss(current_a, length_m) / total_power

    def is_suitable_for(self, current_a: float) -> bool:
        return current_a <= self.max_current_a * CONTINUOUS_RATING_FRACTION

    def safety_status(self, current_a: float) -> SafetyStatus:
        if current_a > self.max_current_a:
            return SafetyStatus.OVER_LIMIT
        if current_a > self.max_current_a * CONTINUOUS_RATING_FRACTION:
            return SafetyStatus.NEAR_LIMIT
        return SafetyStatus.SAFE

    def recommended_max_length(self, current_a: float, max_voltage_drop_v: float) -> float:
        """Longest run (m) that keeps the drop within ``max_voltage_drop_v``."""
        if current_a <= 0:
            return float("inf")
        return max_voltage_drop_v / current_a / self.resistance_per_meter
