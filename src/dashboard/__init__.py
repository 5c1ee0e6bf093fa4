"""Application state and the coordinating controller for the dashboard."""

from src.dashboard.controller import DashboardController, DashboardState, DashboardView
from src.dashboard.settings import DashboardSettings, load_settings

__all__ = [
    "DashboardController",
    "DashboardSettings",
    "DashboardState",
    "DashboardView",
    "load_settings",
]
