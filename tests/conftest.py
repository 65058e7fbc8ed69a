"""Shared fixtures for the trip search tests."""

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Union

import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from trip_search.adapters.catalog import CSVCatalogRepository
from trip_search.adapters.nlp import RuleBasedQueryParser
from trip_search.config import CatalogConfig, OracleConfig, reset_config
from trip_search.domain.models import Season, Trip, TripType
from trip_search.services import SemanticInterpreter, TripSearchService


@dataclass
class StubOracle:
    """Deterministic stand-in for the chat oracle.

    Returns ``response`` or raises it when it is an exception, and
    records every call.
    """

    response: Union[str, Exception] = ""
    calls: List[Dict[str, Any]] = field(default_factory=list)

    async def complete(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        self.calls.append(
            {
                "messages": list(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def catalog():
    """The bundled nine-trip catalog."""
    return CSVCatalogRepository(CatalogConfig()).load()


@pytest.fixture
def make_trip():
    def _make(**overrides):
        data = {
            "id": "t1",
            "name": "Test Trip",
            "destination": "Testland",
            "price": 1000,
            "duration": 7,
            "type": TripType.ADVENTURE,
            "season": Season.SUMMER,
            "activities": ("hiking",),
            "description": "A trip used in tests.",
        }
        data.update(overrides)
        return Trip(**data)

    return _make


@pytest.fixture
def parser():
    return RuleBasedQueryParser()


@pytest.fixture
def oracle_config():
    return OracleConfig(temperature=0.0, max_tokens=500)


@pytest.fixture
def make_oracle():
    return StubOracle


@pytest.fixture
def make_service(catalog, parser, oracle_config):
    """Build a search service around a stub oracle."""

    def _make(response: Union[str, Exception, None] = None):
        oracle = StubOracle(response) if response is not None else None
        interpreter = SemanticInterpreter(
            catalog=catalog,
            fallback=parser,
            oracle=oracle,
            config=oracle_config,
        )
        service = TripSearchService(
            catalog=catalog,
            parser=parser,
            interpreter=interpreter,
        )
        return service, oracle

    return _make
