"""
Range sweeps over ambient temperature and wind.

Each leg runs on a cloned simulator so legs never share component state.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from ebike_sim.simulation.bike_simulator import BikeSimulator
from ebike_sim.simulation.environment import Environment, Wind, WindDirection

logger = logging.getLogger(__name__)

DEFAULT_TEST_TEMPERATURES_C = (-10.0, 0.0, 10.0, 20.0, 30.0, 40.0)
DEFAULT_WIND_SPEEDS_MPS = (0.0, 5.0, 10.0, 15.0)
DEFAULT_WIND_DIRECTIONS = (WindDirection.HEADWIND, WindDirection.TAILWIND, WindDirection.CROSSWIND)

# Guards the km/h rate for runs that stopped immediately
MIN_RUN_TIME_S = 0.1


def _efficiency(range_km: float, time_s: float) -> float:
    """Average progress in km per hour of riding."""
    return range_km / (max(time_s, MIN_RUN_TIME_S) / 3600.0)


class TemperatureTest(BaseModel):
    ambient_temperature_c: float
    range_km: float
    time_s: float
    battery_temperature_c: float
    efficiency: float


class TemperatureImpact(BaseModel):
    tests: List[TemperatureTest] = Field(default_factory=list)

    def add_test(self, temperature_c: float, range_km: float, time_s: float, battery_temp_c: float) -> TemperatureTest:
        test = TemperatureTest(
            ambient_temperature_c=temperature_c,
            range_km=range_km,
            time_s=time_s,
            battery_temperature_c=battery_temp_c,
            efficiency=_efficiency(range_km, time_s)
        )
        self.tests.append(test)
        return test

    def best(self) -> Optional[TemperatureTest]:
        return max(self.tests, key=lambda t: t.efficiency, default=None)

    def worst(self) -> Optional[TemperatureTest]:
        return min(self.tests, key=lambda t: t.efficiency, default=None)

    def optimal_temperature(self) -> float:
        best = self.best()
        return best.ambient_temperature_c if best is not None else 20.0

    def range_spread(self) -> float:
        """Difference (km) between the longest and shortest leg."""
        if not self.tests:
            return 0.0
        ranges = [t.range_km for t in self.tests]
        return max(ranges) - min(ranges)

    def range_spread_percent(self) -> float:
        if not self.tests:
            return 0.0
        shortest = min(t.range_km for t in self.tests)
        if shortest <= 0:
            return 0.0
        return self.range_spread() / shortest * 100.0


class WindImpactResult(BaseModel):
    direction: WindDirection
    wind_speed_mps: float
    range_km: float
    time_s: float
    efficiency: float


class WindImpact(BaseModel):
    results: List[WindImpactResult] = Field(default_factory=list)

    def add_result(self, direction: WindDirection, wind_speed_mps: float, range_km: float, time_s: float) -> WindImpactResult:
        result = WindImpactResult(
            direction=direction,
            wind_speed_mps=wind_speed_mps,
            range_km=range_km,
            time_s=time_s,
            efficiency=_efficiency(range_km, time_s)
        )
        self.results.append(result)
        return result

    def best(self) -> Optional[WindImpactResult]:
        return max(self.results, key=lambda r: r.efficiency, default=None)

    def worst(self) -> Optional[WindImpactResult]:
        return min(self.results, key=lambda r: r.efficiency, default=None)

    def by_direction(self) -> Dict[WindDirection, List[WindImpactResult]]:
        """Results grouped by direction, each group ordered by wind speed."""
        grouped: Dict[WindDirection, List[WindImpactResult]] = OrderedDict()
        for result in self.results:
            grouped.setdefault(result.direction, []).append(result)
        return {d: sorted(group, key=lambda r: r.wind_speed_mps) for d, group in grouped.items()}


def test_temperature_impact(
    simulator: BikeSimulator,
    speed_kmh: float,
    temperatures_c: Sequence[float] = DEFAULT_TEST_TEMPERATURES_C
) -> TemperatureImpact:
    """
    Range at ``speed_kmh`` for each ambient temperature.

    The battery of each leg starts soaked at that leg's ambient temperature.
    """
    impact = TemperatureImpact()
    for temperature in temperatures_c:
        environment = Environment(temperature_c=temperature, wind=simulator.environment.wind.clone())
        battery = simulator.battery.clone(initial_temperature_c=temperature)
        leg = simulator.clone(environment=environment, battery=battery)

        result = leg.test_range(speed_kmh)
        test = impact.add_test(temperature, result.total_distance, result.total_time, result.final_battery_temp)
        logger.info(f"Temperature leg {temperature:g}C: {test.range_km:.1f} km in {test.time_s:.0f} s")
    return impact


def test_wind_impact(
    simulator: BikeSimulator,
    speed_kmh: float,
    wind_speeds_mps: Sequence[float] = DEFAULT_WIND_SPEEDS_MPS,
    directions: Iterable[WindDirection] = DEFAULT_WIND_DIRECTIONS
) -> WindImpact:
    """Range at ``speed_kmh`` for every direction and wind speed combination."""
    impact = WindImpact()
    ambient_c = simulator.environment.temperature_c
    for direction in directions:
        for wind_speed in wind_speeds_mps:
            environment = Environment(temperature_c=ambient_c, wind=Wind(speed_mps=wind_speed, direction=direction))
            leg = simulator.clone(environment=environment)

            result = leg.test_range(speed_kmh)
            impact.add_result(direction, wind_speed, result.total_distance, result.total_time)
            logger.info(f"Wind leg {direction.value} {wind_speed:g} m/s: {result.total_distance:.1f} km")
    return impact
