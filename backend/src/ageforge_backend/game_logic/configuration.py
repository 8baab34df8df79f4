"""Simulation configuration objects for game sessions."""

from __future__ import annotations

from functools import cache

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationDefaults(BaseSettings):
    """Load default simulation parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AGEFORGE_SIMULATION_",
        extra="ignore",
    )

    fixed_step_seconds: float = Field(default=0.05, gt=0)
    max_frame_delta_seconds: float = Field(default=0.4, gt=0)
    max_offline_seconds: float = Field(default=8 * 60 * 60, ge=0)
    min_offline_seconds: float = Field(default=1.0, ge=0)
    autosave_interval_seconds: float = Field(default=15.0, gt=0)
    snapshot_version: int = Field(default=1, ge=1)
    tier_output_bonus: float = Field(default=0.08, ge=0)
    tier_manual_bonus: float = Field(default=0.04, ge=0)
    army_base_cap: int = Field(default=12, ge=0)
    army_cap_per_tier: int = Field(default=2, ge=0)
    journal_capacity: int = Field(default=50, ge=1)

    def to_config(self) -> SimulationConfiguration:
        """Convert defaults into an immutable configuration object."""
        return SimulationConfiguration(**self.model_dump())


class SimulationConfiguration(BaseModel):
    """Immutable representation of the simulation parameters for a session."""

    model_config = ConfigDict(frozen=True)

    fixed_step_seconds: float = Field(default=0.05, gt=0)
    max_frame_delta_seconds: float = Field(default=0.4, gt=0)
    max_offline_seconds: float = Field(default=8 * 60 * 60, ge=0)
    min_offline_seconds: float = Field(default=1.0, ge=0)
    autosave_interval_seconds: float = Field(default=15.0, gt=0)
    snapshot_version: int = Field(default=1, ge=1)
    tier_output_bonus: float = Field(default=0.08, ge=0)
    tier_manual_bonus: float = Field(default=0.04, ge=0)
    army_base_cap: int = Field(default=12, ge=0)
    army_cap_per_tier: int = Field(default=2, ge=0)
    journal_capacity: int = Field(default=50, ge=1)

    def army_cap(self, tier_index: int) -> int:
        """Return the maximum army size allowed at *tier_index*."""
        return self.army_base_cap + tier_index * self.army_cap_per_tier

    def for_session(
        self, overrides: SessionOverrides | None = None
    ) -> SimulationConfiguration:
        """Create a session-specific configuration by applying overrides if provided."""
        if overrides is None:
            return self
        return overrides.apply(self)


class SessionOverrides(BaseModel):
    """Optional per-session overrides for simulation settings."""

    model_config = ConfigDict(frozen=True)

    fixed_step_seconds: float | None = Field(default=None, gt=0)
    max_frame_delta_seconds: float | None = Field(default=None, gt=0)
    max_offline_seconds: float | None = Field(default=None, ge=0)
    min_offline_seconds: float | None = Field(default=None, ge=0)
    autosave_interval_seconds: float | None = Field(default=None, gt=0)
    tier_output_bonus: float | None = Field(default=None, ge=0)
    tier_manual_bonus: float | None = Field(default=None, ge=0)

    def apply(self, config: SimulationConfiguration) -> SimulationConfiguration:
        """Return a copy of *config* with overrides applied."""
        updates = self.model_dump(exclude_none=True)
        if not updates:
            return config
        return SimulationConfiguration(**{**config.model_dump(), **updates})


@cache
def get_default_simulation_configuration() -> SimulationConfiguration:
    """Return the cached default simulation configuration."""
    return SimulationDefaults().to_config()


def build_session_configuration(
    overrides: SessionOverrides | None = None,
) -> SimulationConfiguration:
    """Construct a configuration for a session, applying optional overrides."""
    defaults = get_default_simulation_configuration()
    if overrides is None:
        return defaults
    return overrides.apply(defaults)


__all__ = [
    "SessionOverrides",
    "SimulationConfiguration",
    "SimulationDefaults",
    "build_session_configuration",
    "get_default_simulation_configuration",
]
