import logging
from typing import Any, Dict, List, Literal, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from ebike_sim.config import settings
from ebike_sim.services.translation_service import Language, Translator, get_translator
from ebike_sim.simulation.bike_simulator import BikeSimulator
from ebike_sim.simulation.component_selector import ComponentSelection, ComponentSelector
from ebike_sim.simulation.environment import Environment
from ebike_sim.simulation.results import SimulationResult
from ebike_sim.simulation.schemas import BikeSpecifications, SimulationSummary, ValidationReport
from ebike_sim.simulation.validation import ResultValidator

logger = logging.getLogger(__name__)

router = APIRouter()


class SimulationRequest(BaseModel):
    specs: BikeSpecifications
    environment: Environment = Field(default_factory=Environment)
    language: Language = Field(
        default_factory=lambda: Language(settings.DEFAULT_LANGUAGE),
        description="Language of status labels"
    )


class RangeRequest(SimulationRequest):
    speed_kmh: float = Field(..., gt=0, description="Cruising speed for the range test (km/h)")


class ScenarioRequest(SimulationRequest):
    scenario: Literal["acceleration", "range"] = "acceleration"
    speed_kmh: Optional[float] = Field(None, gt=0, description="Cruising speed, range scenario only")


class CsvImportRequest(BaseModel):
    csv_data: str = Field(..., description="Samples in the flat CSV format")


class SimulationResponse(BaseModel):
    components: Dict[str, Any]
    summary: SimulationSummary
    theoretical_top_speed_kmh: float
    acceleration_time_s: Optional[float] = Field(None, description="Time to the desired top speed")
    component_status: Dict[str, str]
    speed_profile: List[Tuple[float, float]]
    discharge_profile: List[Tuple[float, float]]


def build_simulator(specs: BikeSpecifications, environment: Environment) -> Tuple[ComponentSelection, BikeSimulator]:
    """Size a drivetrain for ``specs`` and wrap it in a fresh simulator."""
    selection = ComponentSelector().select_components(specs)
    return selection, BikeSimulator.from_selection(specs, selection, environment)


def run_scenario(request: ScenarioRequest) -> Tuple[ComponentSelection, BikeSimulator, SimulationResult]:
    selection, simulator = build_simulator(request.specs, request.environment)
    if request.scenario == "range":
        speed = request.speed_kmh if request.speed_kmh is not None else request.specs.desired_max_speed_kmh
        return selection, simulator, simulator.test_range(speed)
    return selection, simulator, simulator.test_acceleration()


def component_status(simulator: BikeSimulator, translator: Translator, language: Language) -> Dict[str, str]:
    return {
        "motor": simulator.motor.temperature_status(translator, language),
        "controller": simulator.controller.temperature_status(translator, language),
        "battery": simulator.battery.temperature_status(translator, language),
    }


def build_response(
    selection: ComponentSelection,
    simulator: BikeSimulator,
    result: SimulationResult,
    translator: Translator,
    language: Language
) -> SimulationResponse:
    return SimulationResponse(
        components=selection.as_dict(),
        summary=result.summary(),
        theoretical_top_speed_kmh=simulator.theoretical_top_speed(),
        acceleration_time_s=result.acceleration_time(simulator.specs.desired_max_speed_kmh),
        component_status=component_status(simulator, translator, language),
        speed_profile=result.speed_profile(),
        discharge_profile=result.discharge_profile()
    )


@router.post("/simulation/acceleration", response_model=SimulationResponse)
def simulate_acceleration(request: SimulationRequest, translator: Translator = Depends(get_translator)):
    """
    Full-throttle run from standstill with automatically sized components.
    """
    try:
        selection, simulator = build_simulator(request.specs, request.environment)
        result = simulator.test_acceleration()
    except ValueError as e:
        logger.warning(f"Acceleration test rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
    return build_response(selection, simulator, result, translator, request.language)


@router.post("/simulation/range", response_model=SimulationResponse)
def simulate_range(request: RangeRequest, translator: Translator = Depends(get_translator)):
    """
    Constant-speed run until the battery is empty or the five hour horizon.
    """
    try:
        selection, simulator = build_simulator(request.specs, request.environment)
        result = simulator.test_range(request.speed_kmh)
    except ValueError as e:
        logger.warning(f"Range test rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
    return build_response(selection, simulator, result, translator, request.language)


@router.post("/simulation/csv", response_class=PlainTextResponse)
def export_csv(request: ScenarioRequest):
    """
    Samples of a run in the flat CSV interchange format.
    """
    try:
        _, _, result = run_scenario(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PlainTextResponse(result.to_csv(), media_type="text/csv")


@router.post("/simulation/csv/summary", response_model=SimulationSummary)
def summarize_csv(request: CsvImportRequest):
    """
    Aggregates of a previously exported run.
    """
    try:
        result = SimulationResult.from_csv(request.csv_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Malformed CSV: {str(e)}")
    return result.summary()


@router.post("/simulation/validate", response_model=ValidationReport)
def validate_simulation(request: ScenarioRequest):
    """
    Run a scenario and check the physical invariants of its samples.
    """
    try:
        _, _, result = run_scenario(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ResultValidator().run_all_tests(result)
