"""
Global pytest configuration and fixtures.
"""

import os
from pathlib import Path

import pytest

from ramlcore import RamlParser
from ramlcore.api import ApiDefinition
from ramlcore.types import TypeFactory, TypeRegistry

RAML_FIXTURES = Path(__file__).parent / "fixtures" / "raml"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the RAML, JSON Schema and XSD fixture documents."""
    return RAML_FIXTURES


@pytest.fixture
def registry() -> TypeRegistry:
    return TypeRegistry()


@pytest.fixture
def factory(registry: TypeRegistry) -> TypeFactory:
    """A factory bound to a fresh registry."""
    return TypeFactory(registry)


@pytest.fixture
def complex_api() -> ApiDefinition:
    return RamlParser().parse(RAML_FIXTURES / "complex_types.raml")


@pytest.fixture
def simple_api() -> ApiDefinition:
    return RamlParser().parse(RAML_FIXTURES / "simple_types.raml")


@pytest.fixture
def songs_api() -> ApiDefinition:
    return RamlParser().parse(RAML_FIXTURES / "songs.raml")


@pytest.fixture
def legacy_api() -> ApiDefinition:
    return RamlParser().parse(RAML_FIXTURES / "legacy.raml")


@pytest.fixture(autouse=True)
def isolated_environment():
    """Keep RAMLCORE_* settings of the developer's shell out of the tests."""
    saved = {key: value for key, value in os.environ.items() if key.startswith("RAMLCORE_")}
    for key in saved:
        del os.environ[key]
    yield
    for key in [key for key in os.environ if key.startswith("RAMLCORE_")]:
        del os.environ[key]
    os.environ.update(saved)
