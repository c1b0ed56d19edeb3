from typing import Optional

from ebike_sim.services.translation_service import Language, Translator, localize
from ebike_sim.simulation.constants import (
    CONTROLLER_DEFAULT_TEMPERATURE_C,
    CONTROLLER_MAX_TEMPERATURE_C,
    CONTROLLER_OVERHEAT_C,
)
from ebike_sim.simulation.derating import CONTROLLER_THERMAL_FACTOR


class Controller:
    """
    Motor controller. Limits the drawn current and derates it when hot.
    """

    def __init__(self, max_current_a: float, weight_kg: float = 0.0, name: str = ""):
        self.name = name
        self.max_current_a = max_current_a
        self.weight_kg = weight_kg
        self.temperature_c = CONTROLLER_DEFAULT_TEMPERATURE_C

    def thermal_factor(self) -> float:
        return CONTROLLER_THERMAL_FACTOR(self.temperature_c)

    def output_current(self, throttle: float, battery_voltage: float) -> float:
        """
        Current (A) the controller lets through for a throttle position.
        """
        requested = self.max_current_a * max(0.0, throttle)
        requested = min(requested, self.max_current_a)
        return requested * self.thermal_factor()

    def update_temperature(self, current_a: float, ambient_c: float, dt: float) -> float:
        power_loss_w = current_a * current_a * 0.1
        temp_rise = power_loss_w * dt * 0.02
        cooling = (self.temperature_c - ambient_c) * dt * 0.01
        self.temperature_c = max(ambient_c, min(CONTROLLER_MAX_TEMPERATURE_C, self.temperature_c + temp_rise - cooling))
        return self.temperature_c

    def efficiency(self, current_a: float) -> float:
        if self.max_current_a <= 0:
            return 0.0
        current_factor = max(0.85, min(1.0, 1.0 - (current_a / self.max_current_a) * 0.1))
        return 0.95 * current_factor * self.thermal_factor()

    def power_loss(self, current_a: float, voltage_v: float) -> float:
        """Switching and conduction loss (W) at the given operating point."""
        return current_a * voltage_v * (1 - self.efficiency(current_a))

    def is_current_safe(self, current_a: float) -> bool:
        return current_a <= self.max_current_a * self.thermal_factor()

    def is_overheating(self) -> bool:
        return self.temperature_c > CONTROLLER_OVERHEAT_C

    def temperature_status(
        self,
        translator: Optional[Translator] = None,
        language: Language = Language.PRIMARY
    ) -> str:
        if self.temperature_c > 80:
            key = "criticalOverheating"
        elif self.temperature_c > 70:
            key = "overheating"
        elif self.temperature_c > 60:
            key = "warm"
        else:
            key = "standard"
        return localize(translator, key, language)

    def reset(self) -> None:
        self.temperature_c = CONTROLLER_DEFAULT_TEMPERATURE_C

    def clone(self) -> "Controller":
        return Controller(max_current_a=self.max_current_a, weight_kg=self.weight_kg, name=self.name)

    def __repr__(self) -> str:
        return f"Controller({self.max_current_a:.0f}A)"
