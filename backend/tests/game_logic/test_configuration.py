from __future__ import annotations

import pytest

from ageforge_backend.game_logic.configuration import (
    SessionOverrides,
    SimulationConfiguration,
    build_session_configuration,
    get_default_simulation_configuration,
)


def test_defaults_match_the_documented_timing() -> None:
    config = get_default_simulation_configuration()

    assert config.fixed_step_seconds == 0.05
    assert config.max_frame_delta_seconds == 0.4
    assert config.max_offline_seconds == 28_800
    assert config.autosave_interval_seconds == 15
    assert config.journal_capacity == 50


def test_environment_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGEFORGE_SIMULATION_FIXED_STEP_SECONDS", "0.1")
    monkeypatch.setenv("AGEFORGE_SIMULATION_ARMY_BASE_CAP", "20")

    config = get_default_simulation_configuration()

    assert config.fixed_step_seconds == 0.1
    assert config.army_cap(0) == 20


def test_army_cap_grows_per_tier() -> None:
    assert SimulationConfiguration().army_cap(3) == 18


def test_session_overrides_only_replace_given_fields() -> None:
    overrides = SessionOverrides(autosave_interval_seconds=5.0)

    config = build_session_configuration(overrides)

    assert config.autosave_interval_seconds == 5.0
    assert config.fixed_step_seconds == 0.05
    assert build_session_configuration() is get_default_simulation_configuration()
    assert config.for_session(None) is config
