"""
Simulation results and the flat CSV interchange format.

Run-level aggregates are never stored: they are reductions over the sample
list, so a result parsed back from CSV reports the same aggregates as the
run that produced it (to the written precision).
"""

import csv
import io
from typing import List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, Field, computed_field

from ebike_sim.simulation.constants import BATTERY_DEPLETED_SOC_PERCENT
from ebike_sim.simulation.schemas import (
    ComponentType,
    SimulationData,
    SimulationSummary,
    ThermalStatus,
)

CSV_HEADER = [
    "Time(s)",
    "Speed(km/h)",
    "Distance(km)",
    "MotorTemp(C)",
    "ControllerTemp(C)",
    "BatteryTemp(C)",
    "BatterySOC(%)",
    "Current(A)",
    "Power(W)",
    "WindEffect(%)",
    "TempEffect(%)",
]

# (field, decimals) in column order
CSV_COLUMNS = [
    ("time_s", 2),
    ("speed_kmh", 1),
    ("distance_km", 3),
    ("motor_temp_c", 1),
    ("controller_temp_c", 1),
    ("battery_temp_c", 1),
    ("battery_soc", 1),
    ("current_a", 1),
    ("power_w", 1),
    ("wind_effect", 1),
    ("temp_effect", 1),
]

# Rows shorter than this are not samples
MIN_CSV_FIELDS = 9


class SimulationResult(BaseModel):
    data: List[SimulationData] = Field(default_factory=list)

    def _column(self, field: str) -> np.ndarray:
        return np.array([getattr(sample, field) for sample in self.data], dtype=float)

    # --- Run-level aggregates ---

    @computed_field
    @property
    def total_distance(self) -> float:
        """Distance covered (km)."""
        return float(np.max(self._column("distance_km"))) if self.data else 0.0

    @computed_field
    @property
    def total_time(self) -> float:
        """Elapsed time (s)."""
        return float(np.max(self._column("time_s"))) if self.data else 0.0

    @computed_field
    @property
    def max_speed(self) -> float:
        return float(np.max(self._column("speed_kmh"))) if self.data else 0.0

    @computed_field
    @property
    def battery_empty(self) -> bool:
        # Same threshold as Battery.has_charge on the unrounded SOC
        if not self.data:
            return False
        return self.data[-1].battery_soc <= BATTERY_DEPLETED_SOC_PERCENT

    @computed_field
    @property
    def average_wind_impact(self) -> float:
        return float(np.mean(self._column("wind_effect"))) if self.data else 0.0

    @computed_field
    @property
    def average_temp_impact(self) -> float:
        return float(np.mean(self._column("temp_effect"))) if self.data else 0.0

    @computed_field
    @property
    def final_battery_temp(self) -> float:
        return self.data[-1].battery_temp_c if self.data else 0.0

    # --- Derived queries ---

    def acceleration_time(self, target_speed_kmh: float) -> Optional[float]:
        """Time (s) of the first sample at or above the target speed."""
        for sample in self.data:
            if sample.speed_kmh >= target_speed_kmh:
                return sample.time_s
        return None

    def average_speed(self) -> float:
        """km/h over the whole run."""
        if self.total_time <= 0:
            return 0.0
        return self.total_distance / (self.total_time / 3600.0)

    def average_power(self) -> float:
        return float(np.mean(self._column("power_w"))) if self.data else 0.0

    def average_current(self) -> float:
        return float(np.mean(self._column("current_a"))) if self.data else 0.0

    def peak_power(self) -> float:
        return float(np.max(self._column("power_w"))) if self.data else 0.0

    def peak_current(self) -> float:
        return float(np.max(self._column("current_a"))) if self.data else 0.0

    def max_motor_temperature(self) -> float:
        return float(np.max(self._column("motor_temp_c"))) if self.data else 0.0

    def max_controller_temperature(self) -> float:
        return float(np.max(self._column("controller_temp_c"))) if self.data else 0.0

    def total_energy_consumed(self) -> float:
        """
        Energy (Wh) by trapezoidal integration of power over time.
        """
        if len(self.data) < 2:
            return 0.0
        times = self._column("time_s")
        powers = self._column("power_w")
        dt_hours = np.diff(times) / 3600.0
        return float(np.sum((powers[1:] + powers[:-1]) / 2.0 * dt_hours))

    def energy_efficiency(self) -> float:
        """km per kWh."""
        energy = self.total_energy_consumed()
        if energy <= 0 or self.total_distance <= 0:
            return 0.0
        return self.total_distance / (energy / 1000.0)

    def thermal_operating_times(self) -> Tuple[float, float, float]:
        """Seconds spent in (normal, warning, critical) thermal regimes."""
        times = {ThermalStatus.NORMAL: 0.0, ThermalStatus.WARNING: 0.0, ThermalStatus.CRITICAL: 0.0}
        for previous, current in zip(self.data, self.data[1:]):
            times[current.thermal_status()] += current.time_s - previous.time_s
        return (times[ThermalStatus.NORMAL], times[ThermalStatus.WARNING], times[ThermalStatus.CRITICAL])

    def find_point_at_soc(self, target_soc: float) -> Optional[SimulationData]:
        return next((d for d in self.data if d.battery_soc <= target_soc), None)

    def find_point_at_temperature(self, target_temp_c: float, component: ComponentType) -> Optional[SimulationData]:
        return next((d for d in self.data if d.temperature_of(component) >= target_temp_c), None)

    def has_reached_speed(self, target_speed_kmh: float) -> bool:
        """True once any sample is within 5% of the target."""
        return any(d.speed_kmh >= target_speed_kmh * 0.95 for d in self.data)

    def _downsample(self, x_field: str, y_field: str, max_points: int) -> List[Tuple[float, float]]:
        if not self.data:
            return []
        step = max(1, len(self.data) // min(max_points, len(self.data)))
        points = [(getattr(d, x_field), getattr(d, y_field)) for d in self.data[::step]]
        last = self.data[-1]
        if abs(points[-1][0] - getattr(last, x_field)) >= 0.001:
            points.append((getattr(last, x_field), getattr(last, y_field)))
        return points

    def speed_profile(self, max_points: int = 50) -> List[Tuple[float, float]]:
        """(time s, speed km/h) points for charting, last sample always included."""
        return self._downsample("time_s", "speed_kmh", max_points)

    def discharge_profile(self, max_points: int = 50) -> List[Tuple[float, float]]:
        """(distance km, SOC %) points for charting."""
        return self._downsample("distance_km", "battery_soc", max_points)

    def summary(self) -> SimulationSummary:
        if not self.data:
            return SimulationSummary()
        normal, warning, critical = self.thermal_operating_times()
        return SimulationSummary(
            total_distance_km=self.total_distance,
            total_time_s=self.total_time,
            max_speed_kmh=self.max_speed,
            average_speed_kmh=self.average_speed(),
            average_power_w=self.average_power(),
            peak_power_w=self.peak_power(),
            energy_consumed_wh=self.total_energy_consumed(),
            energy_efficiency_km_per_kwh=self.energy_efficiency(),
            max_motor_temp_c=self.max_motor_temperature(),
            max_controller_temp_c=self.max_controller_temperature(),
            final_battery_temp_c=self.final_battery_temp,
            battery_depleted=self.battery_empty,
            wind_impact=self.average_wind_impact,
            temp_impact=self.average_temp_impact,
            normal_operating_time_s=normal,
            warning_operating_time_s=warning,
            critical_operating_time_s=critical,
        )

    # --- CSV interchange ---

    def to_csv(self) -> str:
        if not self.data:
            return ""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for sample in self.data:
            writer.writerow([f"{getattr(sample, name):.{decimals}f}" for name, decimals in CSV_COLUMNS])
        return buffer.getvalue().rstrip("\n")

    @classmethod
    def from_csv(cls, csv_data: str) -> "SimulationResult":
        """
        Parse the flat format written by ``to_csv``. The first row is the header.
        """
        if not csv_data:
            return cls()
        rows = [row for row in csv.reader(io.StringIO(csv_data)) if row]
        samples = []
        for row in rows[1:]:
            if len(row) < MIN_CSV_FIELDS:
                continue
            values = {name: float(row[i]) if i < len(row) else 0.0 for i, (name, _) in enumerate(CSV_COLUMNS)}
            samples.append(SimulationData(**values))
        return cls(data=samples)
