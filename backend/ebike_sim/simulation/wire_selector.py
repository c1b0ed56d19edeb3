"""
Conductor gauge selection and wiring loss analysis.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field, computed_field

from ebike_sim.simulation.catalog import WIRE_TABLE
from ebike_sim.simulation.exceptions import InvalidWiringInputError
from ebike_sim.simulation.results import SimulationResult
from ebike_sim.simulation.wire import SafetyStatus, Wire

logger = logging.getLogger(__name__)

DEFAULT_MAX_DROP_PERCENT = 3.0
BATTERY_TO_CONTROLLER_LENGTH_M = 0.5
CONTROLLER_TO_MOTOR_LENGTH_M = 1.0
CHARGING_CURRENT_A = 10.0
CHARGING_CABLE_LENGTH_M = 2.0
# Phase current on the motor leg runs above battery current
MOTOR_LEG_CURRENT_FACTOR = 1.2

BATTERY_TO_CONTROLLER = "battery_to_controller"
CONTROLLER_TO_MOTOR = "controller_to_motor"
CHARGING_CABLE = "charging_cable"


class WireSegmentAnalysis(BaseModel):
    """One conductor run carrying a known current."""
    segment: str = ""
    length_m: float
    current_a: float
    wire: Wire
    voltage_drop_v: float
    voltage_drop_percent: float
    power_loss_w: float
    efficiency: float
    safety_status: SafetyStatus


class WiringAnalysis(BaseModel):
    max_battery_current_a: float = 0.0
    max_motor_current_a: float = 0.0
    system_voltage_v: float = 0.0
    segments: List[WireSegmentAnalysis] = Field(default_factory=list)
    estimated_avg_power_loss_w: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @computed_field
    @property
    def total_power_loss_w(self) -> float:
        """Loss at peak current summed over all segments."""
        return sum(s.power_loss_w for s in self.segments)

    def wire_for(self, segment: str) -> Optional[Wire]:
        return next((s.wire for s in self.segments if s.segment == segment), None)

    def is_safe(self) -> bool:
        return all(s.safety_status != SafetyStatus.OVER_LIMIT for s in self.segments)


class WireSelector:
    """
    Picks the thinnest copper wire that carries a current within its
    continuous rating and keeps the voltage drop under a limit.
    """

    def __init__(self, wire_table: Sequence[Wire] = WIRE_TABLE):
        if not wire_table:
            raise ValueError("Wire table is empty")
        # Highest gauge number first, i.e. thinnest first
        self.wire_table = tuple(sorted(wire_table, key=lambda w: w.awg, reverse=True))

    @property
    def thickest(self) -> Wire:
        return self.wire_table[-1]

    @staticmethod
    def _validate(current_a: float, length_m: float, system_voltage_v: float, max_drop_percent: float) -> None:
        if current_a <= 0:
            raise InvalidWiringInputError(f"Current must be positive, got {current_a}")
        if length_m <= 0:
            raise InvalidWiringInputError(f"Wire length must be positive, got {length_m}")
        if system_voltage_v <= 0:
            raise InvalidWiringInputError(f"System voltage must be positive, got {system_voltage_v}")
        if max_drop_percent <= 0:
            raise InvalidWiringInputError(f"Voltage drop limit must be positive, got {max_drop_percent}")

    def _qualifying(self, current_a: float, length_m: float, max_drop_v: float) -> Iterable[Wire]:
        for wire in self.wire_table:
            if not wire.is_suitable_for(current_a):
                continue
            if wire.voltage_drop(current_a, length_m) <= max_drop_v:
                yield wire

    def select_wire(
        self,
        current_a: float,
        length_m: float,
        system_voltage_v: float,
        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT
    ) -> Wire:
        """
        Thinnest qualifying wire, or the thickest one when none qualifies.

        Raises:
            InvalidWiringInputError: for non-positive current, length, voltage or drop limit
        """
        self._validate(current_a, length_m, system_voltage_v, max_drop_percent)
        max_drop_v = system_voltage_v * max_drop_percent / 100.0

        wire = next(iter(self._qualifying(current_a, length_m, max_drop_v)), None)
        if wire is None:
            logger.warning(
                f"No wire carries {current_a:.1f}A over {length_m:g}m within {max_drop_percent:g}%, "
                f"using {self.thickest.awg} AWG"
            )
            return self.thickest
        return wire

    def select_wiring(
        self,
        battery_to_controller_current_a: float,
        controller_to_motor_current_a: float,
        battery_to_controller_length_m: float = BATTERY_TO_CONTROLLER_LENGTH_M,
        controller_to_motor_length_m: float = CONTROLLER_TO_MOTOR_LENGTH_M,
        system_voltage_v: float = 48.0,
        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT
    ) -> Dict[str, Wire]:
        """Wires for the whole power path, including the charging cable."""
        return {
            BATTERY_TO_CONTROLLER: self.select_wire(
                battery_to_controller_current_a, battery_to_controller_length_m, system_voltage_v, max_drop_percent
            ),
            CONTROLLER_TO_MOTOR: self.select_wire(
                controller_to_motor_current_a, controller_to_motor_length_m, system_voltage_v, max_drop_percent
            ),
            CHARGING_CABLE: self.select_wire(
                CHARGING_CURRENT_A, CHARGING_CABLE_LENGTH_M, system_voltage_v, max_drop_percent
            ),
        }

    def analyze_segment(
        self,
        current_a: float,
        length_m: float,
        system_voltage_v: float,
        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT,
        segment: str = ""
    ) -> WireSegmentAnalysis:
        wire = self.select_wire(current_a, length_m, system_voltage_v, max_drop_percent)
        drop = wire.voltage_drop(current_a, length_m)
        return WireSegmentAnalysis(
            segment=segment,
            length_m=length_m,
            current_a=current_a,
            wire=wire,
            voltage_drop_v=drop,
            voltage_drop_percent=drop / system_voltage_v * 100.0,
            power_loss_w=wire.power_loss(current_a, length_m),
            efficiency=wire.efficiency(current_a, length_m, system_voltage_v),
            safety_status=wire.safety_status(current_a)
        )

    def analyze_lengths(
        self,
        current_a: float,
        lengths_m: Sequence[float],
        system_voltage_v: float = 48.0,
        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT
    ) -> List[WireSegmentAnalysis]:
        """Selection and losses for each candidate run length."""
        return [
            self.analyze_segment(current_a, length, system_voltage_v, max_drop_percent, segment=f"{length:g}m")
            for length in lengths_m
        ]

    def alternative_wires(
        self,
        current_a: float,
        length_m: float,
        system_voltage_v: float,
        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT
    ) -> List[Wire]:
        """Every wire that qualifies, thinnest first."""
        self._validate(current_a, length_m, system_voltage_v, max_drop_percent)
        max_drop_v = system_voltage_v * max_drop_percent / 100.0
        return list(self._qualifying(current_a, length_m, max_drop_v))

    def validate_wiring(self, wire: Wire, current_a: float, length_m: float, system_voltage_v: float,
                        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT) -> bool:
        """True if an already installed wire is adequate for the load."""
        self._validate(current_a, length_m, system_voltage_v, max_drop_percent)
        max_drop_v = system_voltage_v * max_drop_percent / 100.0
        return wire.is_suitable_for(current_a) and wire.voltage_drop(current_a, length_m) <= max_drop_v

    def analyze_wiring(
        self,
        result: SimulationResult,
        system_voltage_v: float,
        battery_to_controller_length_m: float = BATTERY_TO_CONTROLLER_LENGTH_M,
        controller_to_motor_length_m: float = CONTROLLER_TO_MOTOR_LENGTH_M,
        max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT
    ) -> WiringAnalysis:
        """
        Size the power path from the currents observed in a ride.

        An empty result or a ride that never drew current gives an empty analysis.
        """
        if not result.data:
            return WiringAnalysis(system_voltage_v=system_voltage_v)

        peak_a = result.peak_current()
        if peak_a <= 0:
            return WiringAnalysis(system_voltage_v=system_voltage_v)
        motor_peak_a = peak_a * MOTOR_LEG_CURRENT_FACTOR

        segments = [
            self.analyze_segment(peak_a, battery_to_controller_length_m, system_voltage_v,
                                 max_drop_percent, segment=BATTERY_TO_CONTROLLER),
            self.analyze_segment(motor_peak_a, controller_to_motor_length_m, system_voltage_v,
                                 max_drop_percent, segment=CONTROLLER_TO_MOTOR),
            self.analyze_segment(CHARGING_CURRENT_A, CHARGING_CABLE_LENGTH_M, system_voltage_v,
                                 max_drop_percent, segment=CHARGING_CABLE),
        ]

        battery_wire = segments[0].wire
        avg_loss = battery_wire.power_loss(result.average_current(), battery_to_controller_length_m)

        logger.debug(f"Wiring for {peak_a:.1f}A peak: " + ", ".join(f"{s.segment}={s.wire.awg}AWG" for s in segments))

        return WiringAnalysis(
            max_battery_current_a=peak_a,
            max_motor_current_a=motor_peak_a,
            system_voltage_v=system_voltage_v,
            segments=segments,
            estimated_avg_power_loss_w=avg_loss
        )
