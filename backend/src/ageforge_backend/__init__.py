"""Ageforge backend package wiring and entrypoints."""

from ageforge_backend.main import run_dev, run_prod
from ageforge_backend.settings import BackendSettings, get_settings

main = run_dev

__all__ = [
    "BackendSettings",
    "get_settings",
    "main",
    "run_dev",
    "run_prod",
]
