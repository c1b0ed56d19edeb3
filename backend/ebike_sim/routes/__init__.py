from ebike_sim.routes.health import router as health_router
from ebike_sim.routes.components import router as components_router
from ebike_sim.routes.simulation import router as simulation_router
from ebike_sim.routes.analysis import router as analysis_router

__all__ = ["health_router", "components_router", "simulation_router", "analysis_router"]
