from ebike_sim.simulation.battery_model import Battery
from ebike_sim.simulation.bike_simulator import BikeSimulator
from ebike_sim.simulation.component_selector import ComponentSelection, ComponentSelector
from ebike_sim.simulation.controller import Controller
from ebike_sim.simulation.environment import Environment, Wind, WindDirection
from ebike_sim.simulation.exceptions import InvalidSpecificationError, InvalidWiringInputError
from ebike_sim.simulation.motor import Motor
from ebike_sim.simulation.results import SimulationResult
from ebike_sim.simulation.schemas import BikeSpecifications, SimulationData, SimulationSummary
from ebike_sim.simulation.validation import ResultValidator
from ebike_sim.simulation.wire import SafetyStatus, Wire
from ebike_sim.simulation.wire_selector import WireSelector, WiringAnalysis

__all__ = [
    "Battery",
    "BikeSimulator",
    "BikeSpecifications",
    "ComponentSelection",
    "ComponentSelector",
    "Controller",
    "Environment",
    "InvalidSpecificationError",
    "InvalidWiringInputError",
    "Motor",
    "ResultValidator",
    "SafetyStatus",
    "SimulationData",
    "SimulationResult",
    "SimulationSummary",
    "Wind",
    "WindDirection",
    "Wire",
    "WireSelector",
    "WiringAnalysis",
]
