"""
Drivetrain sizing.

Motor, battery and controller are picked from read-only catalogs. Their
weight feeds back into the power requirement, so the selection is repeated
until the drivetrain weight settles (or the iteration cap is reached).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from ebike_sim.simulation.battery_model import Battery
from ebike_sim.simulation.catalog import (
    BATTERY_TIERS,
    CONTROLLER_RATINGS_A,
    MOTOR_CATALOG,
    BatteryTier,
    MotorSpec,
    build_battery,
    build_controller,
    voltage_for_power,
)
from ebike_sim.simulation.controller import Controller
from ebike_sim.simulation.exceptions import InvalidSpecificationError
from ebike_sim.simulation.motor import Motor
from ebike_sim.simulation.schemas import BikeSpecifications

logger = logging.getLogger(__name__)

INITIAL_DRIVETRAIN_WEIGHT_KG = 8.0
MAX_ITERATIONS = 5
WEIGHT_TOLERANCE_KG = 0.05

POWER_MARGIN = 1.2            # on top of drivetrain losses
MOTOR_MARGIN = 1.2            # rated power over required power
AVERAGE_SPEED_RATIO = 0.8     # average riding speed vs. top speed
CAPACITY_MARGIN = 1.25
CONTROLLER_MARGIN = 1.15      # over motor peak current

SMALL_PACK_WH = 500.0
POWERFUL_MOTOR_W = 1000.0


@dataclass
class ComponentSelection:
    motor: Motor
    battery: Battery
    controller: Controller
    system_voltage_v: float
    required_power_w: float
    required_capacity_ah: float
    drivetrain_weight_kg: float
    iterations: int
    weight_history: List[float] = field(default_factory=list)

    @property
    def voltage_mismatch(self) -> bool:
        return abs(self.motor.voltage_v - self.battery.nominal_voltage_v) > 0.1

    def recommendations(self) -> List[str]:
        recs = []
        if self.voltage_mismatch:
            recs.append(
                f"Motor voltage ({self.motor.voltage_v:g}V) does not match battery voltage "
                f"({self.battery.nominal_voltage_v:g}V)"
            )

        motor_peak_current = self.motor.max_current()
        if self.controller.max_current_a < motor_peak_current:
            recs.append(
                f"Controller ({self.controller.max_current_a:g}A) may not handle the motor peak current "
                f"({motor_peak_current:.1f}A)"
            )
        if self.battery.max_current_a < self.controller.max_current_a:
            recs.append(
                f"Battery ({self.battery.max_current_a:g}A) may not supply the controller current "
                f"({self.controller.max_current_a:g}A)"
            )
        if self.battery.energy_wh < SMALL_PACK_WH:
            recs.append("Small battery pack, range will be limited")
        if self.motor.power_w > POWERFUL_MOTOR_W:
            recs.append("Powerful motor needs good cooling and a strong frame")
        return recs

    def as_dict(self) -> Dict[str, object]:
        return {
            "motor": {
                "name": self.motor.name,
                "power_w": self.motor.power_w,
                "max_power_w": self.motor.max_power_w,
                "voltage_v": self.motor.voltage_v,
                "efficiency": self.motor.base_efficiency,
                "weight_kg": self.motor.weight_kg,
            },
            "battery": {
                "name": self.battery.name,
                "capacity_ah": self.battery.capacity_ah,
                "nominal_voltage_v": self.battery.nominal_voltage_v,
                "max_current_a": self.battery.max_current_a,
                "energy_wh": self.battery.energy_wh,
                "weight_kg": self.battery.weight_kg,
            },
            "controller": {
                "name": self.controller.name,
                "max_current_a": self.controller.max_current_a,
                "weight_kg": self.controller.weight_kg,
            },
            "system_voltage_v": self.system_voltage_v,
            "required_power_w": self.required_power_w,
            "required_capacity_ah": self.required_capacity_ah,
            "drivetrain_weight_kg": self.drivetrain_weight_kg,
            "iterations": self.iterations,
            "voltage_mismatch": self.voltage_mismatch,
            "recommendations": self.recommendations(),
        }


class ComponentSelector:
    """
    Fixed-point sizing of motor, battery and controller for a bike.
    """

    def __init__(
        self,
        motor_catalog: Sequence[MotorSpec] = MOTOR_CATALOG,
        battery_tiers: Mapping[float, BatteryTier] = BATTERY_TIERS,
        controller_ratings: Sequence[float] = CONTROLLER_RATINGS_A,
        max_iterations: int = MAX_ITERATIONS,
        weight_tolerance_kg: float = WEIGHT_TOLERANCE_KG
    ):
        if not motor_catalog:
            raise ValueError("Motor catalog is empty")
        self.motor_catalog = tuple(motor_catalog)
        self.battery_tiers = dict(battery_tiers)
        self.controller_ratings = tuple(sorted(controller_ratings))
        self.max_iterations = max(1, max_iterations)
        self.weight_tolerance_kg = weight_tolerance_kg

    @staticmethod
    def validate(specs: BikeSpecifications) -> None:
        """
        Reject bike parameters the power formulas cannot handle.
        """
        checks = {
            "rider_weight_kg": specs.rider_weight_kg,
            "bike_weight_kg": specs.bike_weight_kg,
            "wheel_diameter_in": specs.wheel_diameter_in,
            "desired_max_speed_kmh": specs.desired_max_speed_kmh,
            "desired_max_range_km": specs.desired_max_range_km,
        }
        for name, value in checks.items():
            if value is None or not math.isfinite(value) or value <= 0:
                raise InvalidSpecificationError(f"{name} must be a positive number, got {value!r}")

    def required_power(self, specs: BikeSpecifications, drivetrain_weight_kg: float) -> float:
        """Power (W) to hold the desired top speed, with losses and margin."""
        return specs.required_power(specs.desired_max_speed_kmh, extra_mass_kg=drivetrain_weight_kg) * POWER_MARGIN

    def required_capacity(self, specs: BikeSpecifications, drivetrain_weight_kg: float, voltage_v: float) -> float:
        """
        Capacity (Ah) for the desired range at the average riding speed.
        """
        average_speed_kmh = specs.desired_max_speed_kmh * AVERAGE_SPEED_RATIO
        average_power_w = specs.required_power(average_speed_kmh, extra_mass_kg=drivetrain_weight_kg)
        operating_hours = specs.desired_max_range_km / average_speed_kmh
        required_energy_wh = average_power_w * operating_hours
        return required_energy_wh / voltage_v * CAPACITY_MARGIN

    def select_motor(self, required_power_w: float, voltage_v: float) -> Motor:
        needed_w = required_power_w * MOTOR_MARGIN

        compatible = sorted(
            (m for m in self.motor_catalog if abs(m.voltage_v - voltage_v) < 0.1),
            key=lambda m: m.power_w
        )
        for spec in compatible:
            if spec.power_w >= needed_w:
                return spec.build()

        by_voltage_distance = sorted(
            self.motor_catalog,
            key=lambda m: (abs(m.voltage_v - voltage_v), m.power_w)
        )
        for spec in by_voltage_distance:
            if spec.power_w >= needed_w:
                logger.warning(
                    f"No {voltage_v:g}V motor covers {needed_w:.0f}W, using {spec.name} at {spec.voltage_v:g}V"
                )
                return spec.build()

        strongest = max(self.motor_catalog, key=lambda m: m.power_w)
        logger.warning(f"No catalog motor covers {needed_w:.0f}W, using strongest: {strongest.name}")
        return strongest.build()

    def _tier_for(self, voltage_v: float) -> BatteryTier:
        if voltage_v in self.battery_tiers:
            return self.battery_tiers[voltage_v]
        closest = min(self.battery_tiers, key=lambda v: abs(v - voltage_v))
        tier = self.battery_tiers[closest]
        return BatteryTier(voltage_v, tier.capacities_ah, tier.max_current_ceiling_a)

    def select_battery(self, required_capacity_ah: float, voltage_v: float) -> Battery:
        tier = self._tier_for(voltage_v)
        capacities = sorted(tier.capacities_ah)
        capacity = next((c for c in capacities if c >= required_capacity_ah), None)
        if capacity is None:
            capacity = capacities[-1]
            logger.warning(
                f"Required {required_capacity_ah:.1f}Ah exceeds the {voltage_v:g}V range, using {capacity:g}Ah"
            )
        return build_battery(capacity, voltage_v, tier)

    def select_controller(self, motor: Motor, battery: Battery) -> Controller:
        needed_a = motor.max_current() * CONTROLLER_MARGIN
        rating = next((r for r in self.controller_ratings if r >= needed_a), self.controller_ratings[-1])
        if battery.max_current_a > 0:
            rating = min(rating, battery.max_current_a)
        return build_controller(rating)

    def select_components(self, specs: BikeSpecifications, initial_weight_kg: Optional[float] = None) -> ComponentSelection:
        """
        Size a self-consistent motor/battery/controller triple.

        Raises:
            InvalidSpecificationError: for non-positive weights, speed, wheel size or range
        """
        self.validate(specs)

        weight = INITIAL_DRIVETRAIN_WEIGHT_KG if initial_weight_kg is None else initial_weight_kg
        history = [weight]
        selection = None

        for iteration in range(1, self.max_iterations + 1):
            power_w = self.required_power(specs, weight)
            voltage_v = voltage_for_power(power_w)
            motor = self.select_motor(power_w, voltage_v)

            capacity_ah = self.required_capacity(specs, weight, voltage_v)
            battery = self.select_battery(capacity_ah, voltage_v)
            controller = self.select_controller(motor, battery)

            new_weight = motor.weight_kg + battery.weight_kg + controller.weight_kg
            history.append(new_weight)
            logger.info(
                f"Sizing iteration {iteration}: {power_w:.0f}W @ {voltage_v:g}V, "
                f"{battery.capacity_ah:g}Ah, {controller.max_current_a:g}A, drivetrain {new_weight:.2f}kg"
            )

            selection = ComponentSelection(
                motor=motor,
                battery=battery,
                controller=controller,
                system_voltage_v=voltage_v,
                required_power_w=power_w,
                required_capacity_ah=capacity_ah,
                drivetrain_weight_kg=new_weight,
                iterations=iteration,
                weight_history=list(history)
            )

            converged = abs(new_weight - weight) < self.weight_tolerance_kg
            weight = new_weight
            if converged:
                break

        return selection
