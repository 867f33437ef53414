"""Conformance fixture loader for mal.

Loads YAML fixtures from tests/conformance/ and turns each case into a
parametrized ``conformance_case`` for any test that asks for one. A fixture
document holds a typespec document, its expected rendering and a list of
value/expect cases; it is compiled through the registry path so the config
parser, the registry and the typespec algebra are all exercised together.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from mal import Registry, RegistryBuilder
from mal.testing import register

CONFORMANCE_DIR = Path(__file__).resolve().parent / "conformance"


@dataclass
class ConformanceCase:
    """A single value checked against a typespec document."""

    fixture_name: str
    case_name: str
    typespec: Any
    render: str
    value: Any
    expect: bool

    @property
    def id(self) -> str:
        return f"{self.fixture_name}::{self.case_name}"


def make_registry() -> Registry:
    """Build a registry with the builtin types and the stock test predicates."""
    return register(RegistryBuilder()).build()


@pytest.fixture
def registry() -> Registry:
    return make_registry()


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_conformance_cases() -> list[ConformanceCase]:
    """Load every case from every conformance fixture file."""
    cases: list[ConformanceCase] = []
    for yaml_file in sorted(CONFORMANCE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def _load_file(path: Path) -> list[ConformanceCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    cases: list[ConformanceCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            fixture_name = f"{path.stem}/{doc['name']}"
            for case in doc["cases"]:
                cases.append(
                    ConformanceCase(
                        fixture_name=fixture_name,
                        case_name=case["name"],
                        typespec=doc["typespec"],
                        render=doc["render"],
                        value=case["value"],
                        expect=case["expect"],
                    )
                )
    return cases


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "conformance_case" in metafunc.fixturenames:
        cases = load_conformance_cases()
        metafunc.parametrize("conformance_case", cases, ids=[c.id for c in cases])
