"""
Time-stepped ride simulation for one drivetrain in one environment.
"""

import logging
import math
from typing import Optional

import numpy as np

from ebike_sim.simulation.battery_model import Battery
from ebike_sim.simulation.constants import (
    ACCELERATION_TEST_HORIZON_S,
    ACCELERATION_TEST_STEP_S,
    DEFAULT_TIME_STEP_S,
    EQUILIBRIUM_ACCELERATION_MPS2,
    EQUILIBRIUM_MIN_SPEED_MPS,
    EQUILIBRIUM_WARMUP_S,
    GRAVITY,
    MAX_ACCELERATION_MPS2,
    MAX_THROTTLE_PROBES,
    MIN_SPEED_FOR_FORCE_MPS,
    MIN_THROTTLE,
    RANGE_TEST_HORIZON_S,
    RANGE_TEST_STEP_S,
    ROLLING_RESISTANCE_COEFFICIENT,
    STALL_GRACE_S,
    STALL_SPEED_MPS,
    STANDSTILL_SPEED_MPS,
    THROTTLE_PROBE_HORIZON_S,
    THROTTLE_PROBE_STEP_S,
    THROTTLE_SPEED_TOLERANCE_KMH,
    WIND_EFFECT_MAX_PERCENT,
    WIND_EFFECT_MIN_PERCENT,
)
from ebike_sim.simulation.controller import Controller
from ebike_sim.simulation.environment import Environment, aerodynamic_drag
from ebike_sim.simulation.motor import Motor
from ebike_sim.simulation.results import SimulationResult
from ebike_sim.simulation.schemas import BikeSpecifications, SimulationData
from ebike_sim.simulation.wire_selector import (
    BATTERY_TO_CONTROLLER_LENGTH_M,
    CONTROLLER_TO_MOTOR_LENGTH_M,
    WireSelector,
    WiringAnalysis,
)

logger = logging.getLogger(__name__)


class BikeSimulator:
    """
    Explicit-Euler integration of bike speed with coupled battery,
    motor and controller state.

    Every run starts from reset components, so repeating a run with the
    same arguments gives the same samples.
    """

    def __init__(
        self,
        specs: BikeSpecifications,
        motor: Motor,
        battery: Battery,
        controller: Controller,
        environment: Optional[Environment] = None,
        wire_selector: Optional[WireSelector] = None
    ):
        self.specs = specs
        self.motor = motor
        self.battery = battery
        self.controller = controller
        self.environment = environment if environment is not None else Environment()
        self.wire_selector = wire_selector or WireSelector()

    @classmethod
    def from_selection(cls, specs: BikeSpecifications, selection, environment: Optional[Environment] = None) -> "BikeSimulator":
        """Simulator for the components of a ``ComponentSelection``."""
        return cls(specs, selection.motor, selection.battery, selection.controller, environment)

    @property
    def total_mass_kg(self) -> float:
        """Rider, bike and drivetrain."""
        return (
            self.specs.total_weight_kg
            + self.motor.weight_kg
            + self.battery.weight_kg
            + self.controller.weight_kg
        )

    def reset(self) -> None:
        self.motor.reset(self.environment.temperature_c)
        self.controller.reset()
        self.battery.reset()

    def _rolling_resistance(self) -> float:
        return ROLLING_RESISTANCE_COEFFICIENT * self.total_mass_kg * GRAVITY

    def _wind_effect(self, speed_ms: float) -> float:
        if speed_ms < MIN_SPEED_FOR_FORCE_MPS:
            return 0.0
        percent = self.environment.wind.impact_percentage(speed_ms * 3.6)
        return max(WIND_EFFECT_MIN_PERCENT, min(WIND_EFFECT_MAX_PERCENT, percent))

    @staticmethod
    def _should_stop(acceleration: float, speed_ms: float, time_s: float) -> bool:
        # Forces balanced
        if abs(acceleration) < EQUILIBRIUM_ACCELERATION_MPS2 and time_s > EQUILIBRIUM_WARMUP_S \
                and speed_ms > EQUILIBRIUM_MIN_SPEED_MPS:
            return True
        # Stalled
        if speed_ms < STALL_SPEED_MPS and time_s > STALL_GRACE_S:
            return True
        return False

    def simulate(
        self,
        throttle: float,
        max_time_s: float,
        time_step_s: float = DEFAULT_TIME_STEP_S,
        early_stop: bool = True
    ) -> SimulationResult:
        """
        Ride from standstill at a fixed throttle.

        Stops at the horizon, when the battery is depleted, or (with
        ``early_stop``) at force equilibrium or a stall.
        """
        if time_step_s <= 0:
            raise ValueError(f"Time step must be positive, got {time_step_s}")
        if max_time_s < 0:
            raise ValueError(f"Simulation horizon must not be negative, got {max_time_s}")

        throttle = max(0.0, min(1.0, throttle))
        self.reset()

        ambient_c = self.environment.temperature_c
        wind = self.environment.wind
        mass = self.total_mass_kg
        rolling_force = self._rolling_resistance()
        hours_per_step = time_step_s / 3600.0
        n_steps = int(math.floor(max_time_s / time_step_s + 1e-9))

        speed_ms = 0.0
        distance_km = 0.0
        samples = []

        step = 0
        while step < n_steps and self.battery.has_charge():
            # 1. Resistances at the current speed
            resistive_force = rolling_force + wind.effective_force(speed_ms * 3.6)

            # 2. Propulsion
            motor_power = self.motor.output_power(throttle)
            available_force = motor_power / max(speed_ms, MIN_SPEED_FOR_FORCE_MPS)

            # 3. Acceleration
            net_force = available_force - resistive_force
            acceleration = max(-MAX_ACCELERATION_MPS2, min(MAX_ACCELERATION_MPS2, net_force / mass))
            if speed_ms < STANDSTILL_SPEED_MPS and net_force < 0:
                acceleration = 0.0

            # 4. Kinematics
            speed_ms = max(0.0, speed_ms + acceleration * time_step_s)
            distance_km += speed_ms * time_step_s / 1000.0

            # 5. Power actually delivered at the wheel
            if speed_ms > STANDSTILL_SPEED_MPS:
                delivered_power = max(0.0, min(resistive_force * speed_ms, motor_power))
            else:
                delivered_power = motor_power

            # 6. Current, the controller output being the final ceiling
            current = min(self.motor.required_current(delivered_power), self.battery.max_discharge_current())
            current = min(current, self.controller.output_current(throttle, self.battery.voltage_v))

            # 7. Component state
            drawn = self.battery.use(current, hours_per_step, ambient_c)
            self.motor.update_temperature(delivered_power, ambient_c, time_step_s)
            self.controller.update_temperature(drawn, ambient_c, time_step_s)

            time_s = (step + 1) * time_step_s
            samples.append(SimulationData(
                time_s=time_s,
                speed_kmh=speed_ms * 3.6,
                distance_km=distance_km,
                motor_temp_c=self.motor.temperature_c,
                controller_temp_c=self.controller.temperature_c,
                battery_temp_c=self.battery.temperature_c,
                battery_soc=self.battery.soc,
                current_a=drawn,
                power_w=delivered_power,
                wind_effect=self._wind_effect(speed_ms),
                temp_effect=self.battery.temperature_impact_on_range()
            ))
            step += 1

            if early_stop and self._should_stop(acceleration, speed_ms, time_s):
                break

        logger.debug(
            f"Simulated {len(samples)} steps at throttle {throttle:.2f}: "
            f"{distance_km:.3f} km, SOC {self.battery.soc:.1f}%"
        )
        return SimulationResult(data=samples)

    def test_acceleration(self) -> SimulationResult:
        """Full-throttle run from standstill."""
        return self.simulate(1.0, ACCELERATION_TEST_HORIZON_S, ACCELERATION_TEST_STEP_S)

    def find_throttle_for_speed(self, target_speed_kmh: float) -> float:
        """
        Throttle that settles closest to ``target_speed_kmh``.

        Bisects on probe runs; returns 1.0 when the target is out of reach.
        """
        full = self.simulate(1.0, THROTTLE_PROBE_HORIZON_S, THROTTLE_PROBE_STEP_S)
        if not full.data or target_speed_kmh >= full.max_speed:
            return 1.0

        best_throttle = 1.0
        best_difference = abs(full.data[-1].speed_kmh - target_speed_kmh)
        low, high = MIN_THROTTLE, 1.0

        for _ in range(MAX_THROTTLE_PROBES):
            throttle = (low + high) / 2.0
            probe = self.simulate(throttle, THROTTLE_PROBE_HORIZON_S, THROTTLE_PROBE_STEP_S)
            speed = probe.data[-1].speed_kmh if probe.data else 0.0
            difference = abs(speed - target_speed_kmh)

            if difference < best_difference:
                best_difference = difference
                best_throttle = throttle
            if difference <= THROTTLE_SPEED_TOLERANCE_KMH:
                break

            if speed < target_speed_kmh:
                low = throttle
            else:
                high = throttle

        logger.debug(f"Throttle {best_throttle:.3f} for {target_speed_kmh:.1f} km/h (off by {best_difference:.2f})")
        return best_throttle

    def test_range(self, speed_kmh: float) -> SimulationResult:
        """
        Constant-throttle ride until the battery is empty or five hours pass.
        """
        throttle = self.find_throttle_for_speed(speed_kmh)
        return self.simulate(throttle, RANGE_TEST_HORIZON_S, RANGE_TEST_STEP_S, early_stop=False)

    def theoretical_top_speed(self) -> float:
        """
        Full-throttle steady-state speed (km/h) in still air.

        Solves P = (F_roll + k*v^2) * v for the motor at ambient temperature.
        """
        motor = self.motor.clone()
        motor.reset(self.environment.temperature_c)
        power = motor.output_power(1.0)
        if power <= 0:
            return 0.0

        drag_coefficient = aerodynamic_drag(1.0)
        roots = np.roots([drag_coefficient, 0.0, self._rolling_resistance(), -power])
        speeds = [r.real for r in roots if abs(r.imag) < 1e-6 and r.real > 0]
        return max(speeds) * 3.6 if speeds else 0.0

    def analyze_wiring(
        self,
        result: SimulationResult,
        battery_to_controller_length_m: float = BATTERY_TO_CONTROLLER_LENGTH_M,
        controller_to_motor_length_m: float = CONTROLLER_TO_MOTOR_LENGTH_M
    ) -> WiringAnalysis:
        return self.wire_selector.analyze_wiring(
            result,
            self.battery.nominal_voltage_v,
            battery_to_controller_length_m,
            controller_to_motor_length_m
        )

    def clone(self, environment: Optional[Environment] = None, battery: Optional[Battery] = None) -> "BikeSimulator":
        """Independent simulator with fresh copies of every component."""
        return BikeSimulator(
            self.specs.clone(),
            self.motor.clone(),
            battery if battery is not None else self.battery.clone(),
            self.controller.clone(),
            environment if environment is not None else self.environment.clone(),
            self.wire_selector
        )
