"""Shared test fixtures for all test groups."""

import random

import pytest

from lens.gateway.fake import GatewayFake
from lens.schemas.configuration import BusinessFocus, BusinessStage, RequestConfiguration, VisualStyle
from lens.services.studio import Studio

FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture
def gateway():
    """Fresh GatewayFake with happy_path scenario (default)."""
    return GatewayFake(scenario="happy_path")


@pytest.fixture
def gateway_auth_failure():
    """GatewayFake with auth_failure scenario."""
    return GatewayFake(scenario="auth_failure")


@pytest.fixture
def gateway_backend_failure():
    """GatewayFake with backend_failure scenario."""
    return GatewayFake(scenario="backend_failure")


@pytest.fixture
def gateway_empty_payload():
    """GatewayFake with empty_payload scenario."""
    return GatewayFake(scenario="empty_payload")


@pytest.fixture
def plant_care_config():
    return RequestConfiguration(
        topic="AI-powered plant care app",
        stage=BusinessStage.IDEATION,
        style=VisualStyle.MODERN_SAAS,
        focus=BusinessFocus.STRATEGY,
    )


@pytest.fixture
def studio(gateway):
    """Studio over the happy-path fake with a seeded layout rng and a frozen clock."""
    return Studio(gateway, studio_id="studio-test-001", rng=random.Random(7), clock=lambda: FIXED_NOW_MS)
