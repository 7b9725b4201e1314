"""
Run configuration for the Relief Resource Allocator.

Every random subsystem gets its own seed so runs are reproducible piece by piece.
"""

import json
from pathlib import Path
from typing import Optional, Tuple, Union
from pydantic import BaseModel, Field, model_validator, ConfigDict


class SimulationConfig(BaseModel):
    """Knobs for the day-loop driver and its collaborators."""

    days: int = Field(default=5, ge=1, le=10, description="Number of simulated days")

    # --- Seeds (None = nondeterministic) ---
    network_seed: Optional[int] = Field(default=None, description="Initial route traffic")
    disaster_seed: Optional[int] = Field(default=None, description="Disaster injection")
    request_seed: Optional[int] = Field(default=None, description="Daily request generation")

    # --- Disasters ---
    disaster_probability: float = Field(default=0.2, ge=0.0, le=1.0)
    shortage_percent_range: Tuple[int, int] = Field(default=(10, 30))
    hub_location_id: int = Field(default=1, description="Central warehouse, never taken offline")

    # --- Daily demand ---
    daily_request_range: Tuple[int, int] = Field(default=(1, 3))
    request_quantity_range: Tuple[int, int] = Field(default=(50, 500))
    request_priority_range: Tuple[int, int] = Field(default=(3, 10))

    # --- Routing ---
    seed_initial_load: bool = Field(default=True, description="Pre-load routes with background traffic")
    initial_load_range: Tuple[int, int] = Field(default=(20, 69), description="Percent of capacity")

    # --- Allocation ---
    allow_partial_fulfillment: bool = Field(default=False)

    # --- Output ---
    report_every: int = Field(default=5, ge=1, description="Write a report file every N days")
    report_dir: str = Field(default="reports")
    event_log_file: Optional[str] = Field(default="simulation.log")

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode='after')
    def validate_ranges(self):
        for name in ("shortage_percent_range", "daily_request_range",
                     "request_quantity_range", "request_priority_range",
                     "initial_load_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name}: lower bound {low} is above upper bound {high}")
            if low < 0:
                raise ValueError(f"{name}: bounds must be non-negative")
        if self.initial_load_range[1] > 100 or self.shortage_percent_range[1] > 100:
            raise ValueError("Percent ranges cannot exceed 100")
        return self

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "SimulationConfig":
        with open(path, 'r') as f:
            return cls(**json.load(f))
