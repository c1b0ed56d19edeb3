import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ebike_sim.simulation import impact_analysis
from ebike_sim.simulation.environment import WindDirection
from ebike_sim.simulation.wire import Wire
from ebike_sim.simulation.wire_selector import (
    BATTERY_TO_CONTROLLER_LENGTH_M,
    CONTROLLER_TO_MOTOR_LENGTH_M,
    DEFAULT_MAX_DROP_PERCENT,
    WireSegmentAnalysis,
    WireSelector,
    WiringAnalysis,
)
from ebike_sim.routes.simulation import RangeRequest, SimulationRequest, build_simulator

logger = logging.getLogger(__name__)

router = APIRouter()


class TemperatureSweepRequest(RangeRequest):
    temperatures_c: List[float] = Field(
        default_factory=lambda: list(impact_analysis.DEFAULT_TEST_TEMPERATURES_C),
        min_length=1
    )


class WindSweepRequest(RangeRequest):
    wind_speeds_mps: List[float] = Field(
        default_factory=lambda: list(impact_analysis.DEFAULT_WIND_SPEEDS_MPS),
        min_length=1
    )
    directions: List[WindDirection] = Field(
        default_factory=lambda: list(impact_analysis.DEFAULT_WIND_DIRECTIONS),
        min_length=1
    )


class WiringRequest(SimulationRequest):
    battery_to_controller_length_m: float = Field(BATTERY_TO_CONTROLLER_LENGTH_M, gt=0)
    controller_to_motor_length_m: float = Field(CONTROLLER_TO_MOTOR_LENGTH_M, gt=0)


class WireSelectRequest(BaseModel):
    current_a: float
    length_m: float
    system_voltage_v: float
    max_drop_percent: float = DEFAULT_MAX_DROP_PERCENT
    lengths_m: Optional[List[float]] = Field(None, description="Extra run lengths to compare")


class WireSelectResponse(BaseModel):
    wire: Wire
    analysis: WireSegmentAnalysis
    alternatives: List[Wire]
    length_comparison: List[WireSegmentAnalysis] = Field(default_factory=list)


@router.post("/analysis/temperature")
def analyze_temperature(request: TemperatureSweepRequest) -> Dict[str, Any]:
    """
    Range at a cruising speed across ambient temperatures.
    """
    try:
        _, simulator = build_simulator(request.specs, request.environment)
        impact = impact_analysis.test_temperature_impact(simulator, request.speed_kmh, request.temperatures_c)
    except ValueError as e:
        logger.warning(f"Temperature sweep rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "tests": [t.model_dump() for t in impact.tests],
        "best": impact.best().model_dump() if impact.best() else None,
        "worst": impact.worst().model_dump() if impact.worst() else None,
        "optimal_temperature_c": impact.optimal_temperature(),
        "range_spread_km": impact.range_spread(),
        "range_spread_percent": impact.range_spread_percent(),
    }


@router.post("/analysis/wind")
def analyze_wind(request: WindSweepRequest) -> Dict[str, Any]:
    """
    Range at a cruising speed for each wind direction and speed.
    """
    try:
        _, simulator = build_simulator(request.specs, request.environment)
        impact = impact_analysis.test_wind_impact(
            simulator, request.speed_kmh, request.wind_speeds_mps, request.directions
        )
    except ValueError as e:
        logger.warning(f"Wind sweep rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "results": [r.model_dump(mode="json") for r in impact.results],
        "best": impact.best().model_dump(mode="json") if impact.best() else None,
        "worst": impact.worst().model_dump(mode="json") if impact.worst() else None,
        "by_direction": {
            direction.value: [r.model_dump(mode="json") for r in group]
            for direction, group in impact.by_direction().items()
        },
    }


@router.post("/analysis/wiring", response_model=WiringAnalysis)
def analyze_wiring(request: WiringRequest):
    """
    Wire gauges for the power path, sized from a full-throttle run.
    """
    try:
        _, simulator = build_simulator(request.specs, request.environment)
        result = simulator.test_acceleration()
        return simulator.analyze_wiring(
            result,
            request.battery_to_controller_length_m,
            request.controller_to_motor_length_m
        )
    except ValueError as e:
        logger.warning(f"Wiring analysis rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/wires/select", response_model=WireSelectResponse)
def select_wire(request: WireSelectRequest):
    """
    Thinnest wire for a current, run length and voltage drop limit.
    """
    selector = WireSelector()
    try:
        analysis = selector.analyze_segment(
            request.current_a, request.length_m, request.system_voltage_v, request.max_drop_percent
        )
        alternatives = selector.alternative_wires(
            request.current_a, request.length_m, request.system_voltage_v, request.max_drop_percent
        )
        comparison = []
        if request.lengths_m:
            comparison = selector.analyze_lengths(
                request.current_a, request.lengths_m, request.system_voltage_v, request.max_drop_percent
            )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return WireSelectResponse(
        wire=analysis.wire,
        analysis=analysis,
        alternatives=alternatives,
        length_comparison=comparison
    )
