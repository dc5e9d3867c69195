"""
Shared fixtures for gep_evolution tests.
"""

import random

import pytest

from gep_evolution.config import GEPConfig
from gep_evolution.primitives import PrimitiveSet


def _valid_layout(gene: str, config: GEPConfig, primitives: PrimitiveSet) -> bool:
    """Root is a function, head symbols are known, tail symbols are terminals."""
    return (
        len(gene) == config.gene_length
        and primitives.is_function(gene[0])
        and all(s in primitives for s in gene[:config.head_length])
        and all(primitives.is_terminal(s) for s in gene[config.head_length:])
    )


@pytest.fixture
def valid_layout():
    return _valid_layout


@pytest.fixture
def primitives():
    return PrimitiveSet.from_symbols('+-*/', ['x'])


@pytest.fixture
def xy_primitives():
    return PrimitiveSet.from_symbols('+-*/', ['x', 'y'])


@pytest.fixture
def config():
    return GEPConfig(head_length=8, max_arity=2, num_genes=3, population_size=20,
                     generations=10).validate()


@pytest.fixture
def rng():
    return random.Random(42)
