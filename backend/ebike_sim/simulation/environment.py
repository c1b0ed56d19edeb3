from enum import Enum

from pydantic import BaseModel, Field

from ebike_sim.simulation.constants import AIR_DENSITY, DRAG_COEFFICIENT, FRONTAL_AREA_M2


class WindDirection(str, Enum):
    """Wind direction relative to the direction of travel."""
    HEADWIND = "headwind"
    TAILWIND = "tailwind"
    CROSSWIND = "crosswind"


def aerodynamic_drag(relative_speed_mps: float) -> float:
    """
    Drag equation for an upright rider: F = 0.5 * rho * Cd * A * v^2.
    """
    return 0.5 * AIR_DENSITY * DRAG_COEFFICIENT * FRONTAL_AREA_M2 * relative_speed_mps ** 2


class Wind(BaseModel):
    speed_mps: float = Field(0.0, ge=0, description="Wind speed in m/s")
    direction: WindDirection = Field(WindDirection.HEADWIND, description="Wind direction")

    def effective_speed(self, bike_speed_kmh: float) -> float:
        """
        Air speed seen by the rider (m/s).

        Crosswind is approximated by ground speed only.
        """
        bike_speed_ms = bike_speed_kmh / 3.6
        if self.direction == WindDirection.HEADWIND:
            return bike_speed_ms + self.speed_mps
        if self.direction == WindDirection.TAILWIND:
            return bike_speed_ms - self.speed_mps
        return bike_speed_ms

    def effective_force(self, bike_speed_kmh: float) -> float:
        """
        Aerodynamic resistance (N) with the wind applied.

        Always resistive: a tailwind faster than the bike still produces drag
        from the squared relative speed rather than a push.
        """
        return aerodynamic_drag(self.effective_speed(bike_speed_kmh))

    def impact_percentage(self, bike_speed_kmh: float) -> float:
        """
        Relative change of aerodynamic resistance caused by the wind (%).
        """
        no_wind = aerodynamic_drag(bike_speed_kmh / 3.6)
        if no_wind <= 0:
            return 0.0
        return (self.effective_force(bike_speed_kmh) - no_wind) / no_wind * 100.0

    def clone(self) -> "Wind":
        return self.model_copy(deep=True)


class Environment(BaseModel):
    temperature_c: float = Field(20.0, description="Ambient temperature in Celsius")
    wind: Wind = Field(default_factory=Wind)

    def temperature_impact_on_battery(self) -> float:
        """
        Multiplier on usable battery range for the ambient temperature.

        Peaks at 1.0 around 25 °C and falls off on both sides.
        """
        t = self.temperature_c
        if t <= 0:
            return 0.5 + (t + 20) * 0.025
        elif t <= 25:
            return 0.7 + t * 0.012
        elif t <= 40:
            return 1.0 - (t - 25) * 0.01
        return 0.85 - (t - 40) * 0.005

    def clone(self) -> "Environment":
        return self.model_copy(deep=True)
