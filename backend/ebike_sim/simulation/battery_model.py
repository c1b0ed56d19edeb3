from typing import Optional

from ebike_sim.services.translation_service import Language, Translator, localize
from ebike_sim.simulation.constants import (
    BATTERY_BASE_RESISTANCE_OHM,
    BATTERY_DEFAULT_TEMPERATURE_C,
    BATTERY_DEPLETED_SOC_PERCENT,
    BATTERY_MAX_TEMPERATURE_C,
    BATTERY_MIN_TEMPERATURE_C,
    BATTERY_MIN_VOLTAGE_RATIO,
)
from ebike_sim.simulation.derating import (
    BATTERY_CAPACITY_FACTOR,
    BATTERY_DISCHARGE_FACTOR,
    BATTERY_OCV_FACTOR,
    BATTERY_RESISTANCE_FACTOR,
)


def _clamp_temperature(temperature_c: float) -> float:
    return max(BATTERY_MIN_TEMPERATURE_C, min(BATTERY_MAX_TEMPERATURE_C, temperature_c))


class Battery:
    """
    Li-ion pack with temperature-dependent capacity and internal resistance.

    Charge is tracked in Ah and only ever decreases through ``use``.
    """

    def __init__(
        self,
        capacity_ah: float,
        nominal_voltage_v: float,
        max_current_a: float = 0.0,
        weight_kg: float = 0.0,
        name: str = "",
        initial_temperature_c: float = BATTERY_DEFAULT_TEMPERATURE_C
    ):
        self.name = name
        self._capacity_ah = capacity_ah
        self._nominal_voltage_v = nominal_voltage_v
        self.max_current_a = max_current_a
        self.weight_kg = weight_kg
        self.initial_temperature_c = _clamp_temperature(initial_temperature_c)

        self._charge_ah = capacity_ah
        self._temperature_c = self.initial_temperature_c
        self.voltage_v = nominal_voltage_v

    # --- Constants for the life of the pack ---

    @property
    def capacity_ah(self) -> float:
        return self._capacity_ah

    @property
    def nominal_voltage_v(self) -> float:
        return self._nominal_voltage_v

    # --- State ---

    @property
    def charge_ah(self) -> float:
        return self._charge_ah

    @property
    def temperature_c(self) -> float:
        return self._temperature_c

    @property
    def soc(self) -> float:
        """State of charge (%) relative to the temperature-adjusted capacity."""
        effective = self.effective_capacity()
        if effective <= 0:
            return 0.0
        return max(0.0, min(100.0, self._charge_ah / effective * 100.0))

    @property
    def energy_wh(self) -> float:
        """Nominal pack energy (Wh)."""
        return self._capacity_ah * self._nominal_voltage_v

    # --- Temperature-dependent characteristics ---

    def effective_capacity(self) -> float:
        return self._capacity_ah * BATTERY_CAPACITY_FACTOR(self._temperature_c)

    def internal_resistance(self) -> float:
        return BATTERY_BASE_RESISTANCE_OHM * BATTERY_RESISTANCE_FACTOR(self._temperature_c)

    def max_discharge_current(self) -> float:
        return self.max_current_a * BATTERY_DISCHARGE_FACTOR(self._temperature_c)

    def open_circuit_voltage(self) -> float:
        effective = self.effective_capacity()
        ratio = self._charge_ah / effective if effective > 0 else 0.0
        return self._nominal_voltage_v * BATTERY_OCV_FACTOR(ratio)

    def voltage_under_load(self, current_a: float) -> float:
        """Terminal voltage for a load, floored at 70% of nominal."""
        sag = current_a * self.internal_resistance()
        return max(self.open_circuit_voltage() - sag, self._nominal_voltage_v * BATTERY_MIN_VOLTAGE_RATIO)

    # --- Discharge ---

    def use(self, current_a: float, hours: float, ambient_c: float) -> float:
        """
        Draw ``current_a`` for ``hours``.

        Order matters: temperature first, then the temperature-derated
        current limit, then voltage sag, then charge (including I^2*R loss
        expressed as extra Ah). Returns the current actually drawn.
        """
        self._update_temperature(current_a, ambient_c, hours)

        effective_current = max(0.0, min(current_a, self.max_discharge_current()))
        resistance = self.internal_resistance()
        self.voltage_v = max(
            self.open_circuit_voltage() - effective_current * resistance,
            self._nominal_voltage_v * BATTERY_MIN_VOLTAGE_RATIO
        )

        resistance_loss_w = effective_current * effective_current * resistance
        loss_equivalent_a = resistance_loss_w * hours / self._nominal_voltage_v
        used_ah = (effective_current + loss_equivalent_a) * hours
        self._charge_ah = max(0.0, self._charge_ah - used_ah)
        return effective_current

    def _update_temperature(self, current_a: float, ambient_c: float, hours: float) -> None:
        heating_w = current_a * current_a * self.internal_resistance()
        cooling_rate = 0.5
        temp_change = (heating_w * hours * 3600 * 0.0001) + (ambient_c - self._temperature_c) * cooling_rate * hours * 10
        self._temperature_c = _clamp_temperature(self._temperature_c + temp_change)

    def has_charge(self) -> bool:
        return self.soc > BATTERY_DEPLETED_SOC_PERCENT

    # --- Temperature handling ---

    def force_temperature(self, temperature_c: float) -> None:
        self._temperature_c = _clamp_temperature(temperature_c)

    def is_safe_temperature(self) -> bool:
        return -10 <= self._temperature_c <= 45

    def temperature_status(
        self,
        translator: Optional[Translator] = None,
        language: Language = Language.PRIMARY
    ) -> str:
        t = self._temperature_c
        if t < -10:
            key = "criticalCold"
        elif t < 0:
            key = "veryCold"
        elif t < 10:
            key = "cold"
        elif t > 45:
            key = "criticalHot"
        elif t > 35:
            key = "hot"
        else:
            key = "optimal"
        return localize(translator, key, language)

    # --- Range estimates ---

    def temperature_impact_on_range(self) -> float:
        """Capacity lost to the current temperature (%)."""
        if self._capacity_ah <= 0:
            return 0.0
        return (self._capacity_ah - self.effective_capacity()) / self._capacity_ah * 100.0

    def available_energy(self) -> float:
        """Energy left in the pack (Wh) at nominal voltage."""
        return self._charge_ah * self._nominal_voltage_v

    def estimate_range(self, average_power_w: float) -> float:
        """Hours of riding at ``average_power_w``, with a 10% reserve."""
        if average_power_w <= 0:
            return 0.0
        return self.effective_capacity() * self._nominal_voltage_v / average_power_w * 0.9

    def remaining_time(self, current_a: float) -> float:
        """Hours until empty at a constant current."""
        if current_a <= 0:
            return 0.0
        return self._charge_ah / current_a

    # --- Lifecycle ---

    def reset(self) -> None:
        self._charge_ah = self._capacity_ah
        self._temperature_c = self.initial_temperature_c
        self.voltage_v = self._nominal_voltage_v

    def clone(self, initial_temperature_c: Optional[float] = None) -> "Battery":
        """Fresh, fully charged pack with the same ratings."""
        return Battery(
            capacity_ah=self._capacity_ah,
            nominal_voltage_v=self._nominal_voltage_v,
            max_current_a=self.max_current_a,
            weight_kg=self.weight_kg,
            name=self.name,
            initial_temperature_c=self.initial_temperature_c if initial_temperature_c is None else initial_temperature_c
        )

    def __repr__(self) -> str:
        return f"Battery({self._capacity_ah:g}Ah @ {self._nominal_voltage_v:g}V)"
