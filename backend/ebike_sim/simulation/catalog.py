"""
Read-only component catalogs used for sizing.

Entries are frozen and the tables are tuples; nothing mutates them after import.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ebike_sim.simulation.battery_model import Battery
from ebike_sim.simulation.controller import Controller
from ebike_sim.simulation.motor import Motor
from ebike_sim.simulation.wire import Wire


@dataclass(frozen=True)
class MotorSpec:
    name: str
    voltage_v: float
    power_w: float
    max_power_w: float
    efficiency: float
    weight_kg: float

    def build(self) -> Motor:
        return Motor(
            power_w=self.power_w,
            max_power_w=self.max_power_w,
            voltage_v=self.voltage_v,
            efficiency=self.efficiency,
            weight_kg=self.weight_kg,
            name=self.name
        )


@dataclass(frozen=True)
class BatteryTier:
    """Standard pack options for one system voltage."""
    voltage_v: float
    capacities_ah: Tuple[float, ...]
    max_current_ceiling_a: float


@dataclass(frozen=True)
class ControllerBand:
    """Controllers rated up to ``max_current_a`` weigh ``weight_kg``."""
    max_current_a: float
    weight_kg: float


MOTOR_CATALOG: Tuple[MotorSpec, ...] = (
    # 36 V
    MotorSpec("Bafang BBS01B", 36.0, 250.0, 350.0, 0.82, 3.5),
    MotorSpec("Tongsheng TSDZ2", 36.0, 350.0, 500.0, 0.83, 3.9),
    MotorSpec("Bafang G062 500W", 36.0, 500.0, 750.0, 0.84, 4.5),
    MotorSpec("MXUS XF15R 750W", 36.0, 750.0, 1000.0, 0.85, 5.2),
    # 48 V
    MotorSpec("Bafang BBS02B", 48.0, 500.0, 750.0, 0.85, 4.6),
    MotorSpec("Bafang BBSHD", 48.0, 750.0, 1200.0, 0.87, 5.3),
    MotorSpec("MXUS XF40 1000W", 48.0, 1000.0, 1500.0, 0.87, 5.8),
    MotorSpec("Leafmotor 1500W", 48.0, 1500.0, 2200.0, 0.88, 7.2),
    MotorSpec("QS205 2000W", 48.0, 2000.0, 3000.0, 0.88, 8.5),
    # 60 V
    MotorSpec("QS205 V3 2000W", 60.0, 2000.0, 3000.0, 0.88, 8.0),
    MotorSpec("QS273 3000W", 60.0, 3000.0, 4500.0, 0.89, 9.5),
    MotorSpec("QS273 4000W", 60.0, 4000.0, 6000.0, 0.90, 11.0),
    # 72 V
    MotorSpec("MXUS 3000W", 72.0, 3000.0, 5000.0, 0.89, 10.5),
    MotorSpec("QS273 V4 5000W", 72.0, 5000.0, 8000.0, 0.90, 13.0),
    MotorSpec("QS273 V4 8000W", 72.0, 8000.0, 12000.0, 0.91, 16.5),
)

# (upper power bound W, system voltage V), evaluated in order
VOLTAGE_TIERS: Tuple[Tuple[float, float], ...] = (
    (500.0, 36.0),
    (1500.0, 48.0),
    (3000.0, 60.0),
)
TOP_VOLTAGE_V = 72.0

BATTERY_TIERS: Dict[float, BatteryTier] = {
    36.0: BatteryTier(36.0, (10.0, 13.0, 14.5, 17.5, 20.0, 25.0), 35.0),
    48.0: BatteryTier(48.0, (10.0, 13.0, 14.0, 17.5, 20.0, 25.0, 30.0), 45.0),
    60.0: BatteryTier(60.0, (15.0, 20.0, 25.0, 30.0, 35.0), 60.0),
    72.0: BatteryTier(72.0, (20.0, 25.0, 30.0, 35.0, 40.0, 50.0), 80.0),
}

BATTERY_C_RATE = 3.0
BATTERY_ENERGY_DENSITY_WH_PER_KG = 160.0
BATTERY_HOUSING_WEIGHT_KG = 0.8

CONTROLLER_RATINGS_A: Tuple[float, ...] = (15, 18, 22, 25, 30, 35, 40, 45, 50, 60, 80, 100)

CONTROLLER_WEIGHT_BANDS: Tuple[ControllerBand, ...] = (
    ControllerBand(25.0, 0.4),
    ControllerBand(40.0, 0.6),
    ControllerBand(60.0, 0.9),
)
CONTROLLER_HEAVY_WEIGHT_KG = 1.4

# Ascending by gauge number, i.e. thickest first
WIRE_TABLE: Tuple[Wire, ...] = (
    Wire(awg=4, cross_section_mm2=21.15, max_current_a=150, resistance_per_meter=0.00081),
    Wire(awg=6, cross_section_mm2=13.30, max_current_a=101, resistance_per_meter=0.00129),
    Wire(awg=8, cross_section_mm2=8.37, max_current_a=73, resistance_per_meter=0.00205),
    Wire(awg=10, cross_section_mm2=5.26, max_current_a=55, resistance_per_meter=0.00328),
    Wire(awg=12, cross_section_mm2=3.31, max_current_a=41, resistance_per_meter=0.00521),
    Wire(awg=14, cross_section_mm2=2.08, max_current_a=32, resistance_per_meter=0.00829),
    Wire(awg=16, cross_section_mm2=1.31, max_current_a=22, resistance_per_meter=0.0132),
    Wire(awg=18, cross_section_mm2=0.82, max_current_a=16, resistance_per_meter=0.0210),
)


def voltage_for_power(required_power_w: float) -> float:
    """System voltage tier for a power requirement."""
    for upper_w, voltage in VOLTAGE_TIERS:
        if required_power_w <= upper_w:
            return voltage
    return TOP_VOLTAGE_V


def controller_weight(max_current_a: float) -> float:
    for band in CONTROLLER_WEIGHT_BANDS:
        if max_current_a <= band.max_current_a:
            return band.weight_kg
    return CONTROLLER_HEAVY_WEIGHT_KG


def battery_weight(capacity_ah: float, voltage_v: float) -> float:
    return capacity_ah * voltage_v / BATTERY_ENERGY_DENSITY_WH_PER_KG + BATTERY_HOUSING_WEIGHT_KG


def build_battery(capacity_ah: float, voltage_v: float, tier: BatteryTier) -> Battery:
    return Battery(
        capacity_ah=capacity_ah,
        nominal_voltage_v=voltage_v,
        max_current_a=min(capacity_ah * BATTERY_C_RATE, tier.max_current_ceiling_a),
        weight_kg=battery_weight(capacity_ah, voltage_v),
        name=f"{voltage_v:g}V {capacity_ah:g}Ah"
    )


def build_controller(max_current_a: float) -> Controller:
    return Controller(
        max_current_a=max_current_a,
        weight_kg=controller_weight(max_current_a),
        name=f"{max_current_a:.0f}A Controller"
    )
