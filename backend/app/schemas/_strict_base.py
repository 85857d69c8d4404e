"""Strict schema baselines with forbidden extras by default."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Neutral strict base for scheduling DTOs."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class FrozenModel(StrictModel):
    """Immutable value object; validator inputs and results never change after creation."""

    model_config = ConfigDict(extra="forbid", frozen=True)
