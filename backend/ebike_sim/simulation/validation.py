from typing import Callable, List

import numpy as np

from ebike_sim.simulation.constants import (
    BATTERY_MAX_TEMPERATURE_C,
    BATTERY_MIN_TEMPERATURE_C,
    CONTROLLER_MAX_TEMPERATURE_C,
    MAX_ACCELERATION_MPS2,
    MOTOR_MAX_TEMPERATURE_C,
)
from ebike_sim.simulation.results import SimulationResult
from ebike_sim.simulation.schemas import ValidationReport, ValidationResult


class ResultValidator:
    """
    Invariant checks over a finished ride.
    """

    def __init__(self, acceleration_tolerance_mps2: float = 0.01):
        self.acceleration_tolerance_mps2 = acceleration_tolerance_mps2

    def run_all_tests(self, result: SimulationResult) -> ValidationReport:
        """Run all checks on a simulation result."""

        tests: List[Callable[[SimulationResult], ValidationResult]] = [
            self.test_time_monotonic,
            self.test_distance_monotonic,
            self.test_soc_bounds,
            self.test_temperature_bounds,
            self.test_acceleration_bounds
        ]

        results = []
        for test in tests:
            try:
                results.append(test(result))
            except Exception as e:
                results.append(ValidationResult(
                    test_name=test.__name__,
                    passed=False,
                    details={"error": str(e)}
                ))

        passed_count = sum(1 for r in results if r.passed)
        score = passed_count / len(results) if results else 0.0

        if score >= 0.95:
            interpretation = "EXCELLENT"
        elif score >= 0.8:
            interpretation = "GOOD"
        else:
            interpretation = "POOR"

        return ValidationReport(
            overall_score=score,
            tests_passed=passed_count,
            total_tests=len(results),
            results=results,
            interpretation=interpretation
        )

    def test_time_monotonic(self, result: SimulationResult) -> ValidationResult:
        """Sample times must be strictly increasing."""
        times = np.array([d.time_s for d in result.data])
        violations = int(np.sum(np.diff(times) <= 0)) if len(times) > 1 else 0
        return ValidationResult(
            test_name="time_monotonic",
            passed=violations == 0,
            details={"violations": violations, "samples": len(times)}
        )

    def test_distance_monotonic(self, result: SimulationResult) -> ValidationResult:
        distances = np.array([d.distance_km for d in result.data])
        violations = int(np.sum(np.diff(distances) < 0)) if len(distances) > 1 else 0
        return ValidationResult(
            test_name="distance_monotonic",
            passed=violations == 0,
            details={"violations": violations}
        )

    def test_soc_bounds(self, result: SimulationResult) -> ValidationResult:
        out_of_bounds = [d.time_s for d in result.data if not 0.0 <= d.battery_soc <= 100.0]
        return ValidationResult(
            test_name="soc_bounds",
            passed=not out_of_bounds,
            details={"violations": len(out_of_bounds), "first_at_s": out_of_bounds[0] if out_of_bounds else None}
        )

    def test_temperature_bounds(self, result: SimulationResult) -> ValidationResult:
        """
        Component temperatures stay inside their model clamps.
        """
        violations = {"battery": 0, "motor": 0, "controller": 0}
        for d in result.data:
            if not BATTERY_MIN_TEMPERATURE_C <= d.battery_temp_c <= BATTERY_MAX_TEMPERATURE_C:
                violations["battery"] += 1
            if d.motor_temp_c > MOTOR_MAX_TEMPERATURE_C:
                violations["motor"] += 1
            if d.controller_temp_c > CONTROLLER_MAX_TEMPERATURE_C:
                violations["controller"] += 1

        return ValidationResult(
            test_name="temperature_bounds",
            passed=sum(violations.values()) == 0,
            details=violations
        )

    def test_acceleration_bounds(self, result: SimulationResult) -> ValidationResult:
        """Speed changes between samples imply |a| <= 5 m/s²."""
        if len(result.data) < 2:
            return ValidationResult(test_name="acceleration_bounds", passed=True, details={"max_acceleration_mps2": 0.0})

        times = np.array([d.time_s for d in result.data])
        speeds = np.array([d.speed_kmh for d in result.data]) / 3.6
        dt = np.diff(times)
        valid = dt > 0
        accelerations = np.abs(np.diff(speeds)[valid] / dt[valid])
        max_accel = float(np.max(accelerations)) if accelerations.size else 0.0

        limit = MAX_ACCELERATION_MPS2 + self.acceleration_tolerance_mps2
        return ValidationResult(
            test_name="acceleration_bounds",
            passed=max_accel <= limit,
            details={"max_acceleration_mps2": max_accel, "limit_mps2": MAX_ACCELERATION_MPS2}
        )
