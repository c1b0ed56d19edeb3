import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from ebike_sim.simulation.component_selector import ComponentSelector
from ebike_sim.simulation.schemas import BikeSpecifications

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/components/select")
def select_components(specs: BikeSpecifications) -> Dict[str, Any]:
    """
    Size motor, battery and controller for a rider, bike and target performance.
    """
    try:
        selection = ComponentSelector().select_components(specs)
    except ValueError as e:
        logger.warning(f"Component selection rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
    return selection.as_dict()
