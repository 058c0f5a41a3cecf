"""Demo fleet generation settings."""

from pydantic import BaseModel, Field, model_validator


class FleetConfig(BaseModel):
    """Where and how demo vehicles are scattered when no live fleet is available."""

    center_lat: float = Field(default=12.0, ge=-90, le=90, description="Scatter center latitude (Kano)")
    center_lng: float = Field(default=8.52, ge=-180, le=180, description="Scatter center longitude (Kano)")
    default_count: int = Field(default=7, ge=0, description="Vehicles generated when no count is given")
    min_radius_km: float = Field(default=3.0, ge=0, description="Closest distance from center (km)")
    max_radius_km: float = Field(default=25.0, gt=0, description="Farthest distance from center (km)")
    min_speed_kmh: float = Field(default=20.0, gt=0, description="Slowest initial cruising speed")
    max_speed_kmh: float = Field(default=55.0, gt=0, description="Fastest initial cruising speed")
    capacity_total: int = Field(default=100, gt=0, description="Cargo units per vehicle, fixed for the session")
    min_used: float = Field(default=10.0, ge=0, description="Lower bound of initial used units")
    max_used: float = Field(default=80.0, ge=0, description="Upper bound of initial used units")

    @model_validator(mode="after")
    def _check_ranges(self) -> "FleetConfig":
        if self.min_radius_km > self.max_radius_km:
            raise ValueError("min_radius_km must not exceed max_radius_km")
        if self.min_speed_kmh > self.max_speed_kmh:
            raise ValueError("min_speed_kmh must not exceed max_speed_kmh")
        if self.min_used > self.max_used:
            raise ValueError("min_used must not exceed max_used")
        if self.max_used > self.capacity_total:
            raise ValueError("max_used must not exceed capacity_total")
        return self
