"""Shared pytest fixtures for scriptenv tests."""

from collections.abc import Iterator

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from scriptenv import Binding
from scriptenv.core.config import reload_config

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Make every test see configuration built from its own environment."""
    reload_config()
    yield
    reload_config()


@pytest.fixture
def three_levels() -> tuple[Binding, Binding, Binding]:
    """Provide a root -> a -> b chain with `x` bound at the root."""
    root = Binding.top("host").set("x", 1)
    a = root.child()
    b = a.child()
    return root, a, b
