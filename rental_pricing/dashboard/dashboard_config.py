# This file defines runtime configuration for the operator dashboard.
# It exists so the API location and request timeout can be tuned through environment variables.

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class DashboardConfig:
    api_base_url: str
    request_timeout_seconds: int


def load_dashboard_config(*, load_env: bool = True) -> DashboardConfig:
    if load_env:
        load_dotenv()

    api_base_url = os.getenv("DASHBOARD_API_BASE_URL")
    if not api_base_url:
        api_host = os.getenv("API_HOST", "localhost")
        api_port = os.getenv("API_PORT", "8000")
        api_base_url = f"http://{api_host}:{api_port}/api/v1"

    return DashboardConfig(
        api_base_url=api_base_url.rstrip("/"),
        request_timeout_seconds=int(os.getenv("DASHBOARD_REQUEST_TIMEOUT_SECONDS", "8")),
    )
