"""
Shared pytest fixtures for modelspine tests.

This module provides:
- structlog reset between tests so captured debug events are not filtered
- A fresh ``FakeService`` and an ``AttributeTestModel`` bound to it

Usage:
    def test_something(model, service):
        model.merge_attributes({"one_identity": "123"})
        model.one_identity
        assert service.single.lookups == ["123"]
"""

import sys
from pathlib import Path

import pytest
import structlog

# Ensure modelspine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tests._support.fakes import AttributeTestModel, FakeService


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any configure_logging() call made by a test."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def model(service: FakeService) -> AttributeTestModel:
    return AttributeTestModel(service=service)
