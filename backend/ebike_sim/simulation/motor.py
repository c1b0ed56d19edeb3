import math
from typing import Optional

from ebike_sim.services.translation_service import Language, Translator, localize
from ebike_sim.simulation.constants import MOTOR_MAX_TEMPERATURE_C, MOTOR_OVERHEAT_C
from ebike_sim.simulation.derating import MOTOR_EFFICIENCY_FACTOR, MOTOR_THERMAL_LIMIT


class Motor:
    """
    Hub/mid-drive motor with a lumped thermal model.

    Output power and efficiency are derated by the winding temperature.
    """

    def __init__(
        self,
        power_w: float,
        max_power_w: float,
        voltage_v: float,
        efficiency: float = 0.85,
        weight_kg: float = 0.0,
        name: str = "",
        ambient_temperature_c: float = 20.0
    ):
        self.name = name
        self.power_w = power_w
        self.max_power_w = max_power_w
        self.voltage_v = voltage_v
        self.base_efficiency = efficiency
        self.weight_kg = weight_kg
        self.temperature_c = ambient_temperature_c

    def efficiency(self) -> float:
        """Base efficiency derated by temperature."""
        return self.base_efficiency * MOTOR_EFFICIENCY_FACTOR(self.temperature_c)

    def thermal_limit_factor(self) -> float:
        return MOTOR_THERMAL_LIMIT(self.temperature_c)

    def output_power(self, throttle: float) -> float:
        """
        Mechanical power (W) delivered for a throttle position in [0, 1].
        """
        requested = self.power_w * max(0.0, min(1.0, throttle))
        requested = min(requested, self.max_power_w)
        return requested * self.thermal_limit_factor()

    def required_current(self, power_w: float) -> float:
        """Electrical current (A) needed to deliver ``power_w`` at the wheel."""
        if self.voltage_v <= 0:
            return 0.0
        return power_w / (self.voltage_v * self.efficiency())

    def max_current(self) -> float:
        """Peak current (A) at max power and rated voltage."""
        if self.voltage_v <= 0:
            return 0.0
        return self.max_power_w / self.voltage_v

    def torque(self, rpm: float) -> float:
        """Full-throttle torque (N·m) at the given shaft speed."""
        if rpm <= 0:
            return 0.0
        return self.output_power(1.0) * 60.0 / (2 * math.pi * rpm)

    def update_temperature(self, power_w: float, ambient_c: float, dt: float) -> float:
        """
        Heat from conversion losses, Newtonian cooling toward ambient.
        """
        loss_w = power_w * (1 - self.efficiency())
        temp_rise = loss_w * dt * 0.01
        cooling = (self.temperature_c - ambient_c) * dt * 0.005
        self.temperature_c = max(ambient_c, min(MOTOR_MAX_TEMPERATURE_C, self.temperature_c + temp_rise - cooling))
        return self.temperature_c

    def can_deliver(self, power_w: float) -> bool:
        return power_w <= self.max_power_w * self.thermal_limit_factor()

    def is_overheating(self) -> bool:
        return self.temperature_c > MOTOR_OVERHEAT_C

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

    def reset(self, ambient_c: float) -> None:
        self.temperature_c = ambient_c

    def clone(self) -> "Motor":
        """Fresh motor with the same ratings."""
        return Motor(
            power_w=self.power_w,
            max_power_w=self.max_power_w,
            voltage_v=self.voltage_v,
            efficiency=self.base_efficiency,
            weight_kg=self.weight_kg,
            name=self.name
        )

    def __repr__(self) -> str:
        return f"Motor({self.name!r}, {self.power_w:.0f}W/{self.max_power_w:.0f}W @ {self.voltage_v:.0f}V)"
