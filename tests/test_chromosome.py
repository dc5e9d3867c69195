"""Tests for chromosomes, linkers and single-chromosome JSON serialization"""

import math

import pytest

from gep_evolution.chromosome import Chromosome, Linker
from gep_evolution.exceptions import ConfigurationError, DomainError, InvalidExpression
from gep_evolution.primitives import PrimitiveSet


class TestLinker:

    @pytest.mark.parametrize("linker, expected", [
        (Linker.SUM, 15.0),
        (Linker.MAX, 9.0),
        (Linker.MIN, 6.0),
    ])
    def test_linking(self, primitives, linker, expected):
        # 2x and x^2 at x = 3
        chromosome = Chromosome(['+xx', '*xx'], linker)
        assert chromosome.evaluate(primitives, {'x': 3.0}).value == expected

    def test_coerce(self):
        assert Linker.coerce('MAX') is Linker.MAX
        assert Linker.coerce('min') is Linker.MIN
        assert Linker.coerce(Linker.SUM) is Linker.SUM

    def test_unknown_linker(self):
        with pytest.raises(ConfigurationError):
            Linker.coerce('avg')
        with pytest.raises(ConfigurationError):
            Chromosome(['+xx'], 'product')


class TestChromosome:

    def test_failing_gene_fails_chromosome(self):
        primitives = PrimitiveSet.from_symbols('+S', ['x'])
        chromosome = Chromosome(['+xx', 'Sxx'])
        result = chromosome.evaluate(primitives, {'x': -1.0})
        assert isinstance(result.error, DomainError)

    def test_invalid_gene_fails_chromosome(self, primitives):
        result = Chromosome(['+xx', '++x']).evaluate(primitives, {'x': 1.0})
        assert isinstance(result.error, InvalidExpression)

    def test_decode_and_infix(self, primitives):
        chromosome = Chromosome(['*xx+x', 'x*xxx'])
        assert chromosome.decode(primitives) == ['*xx', 'x']
        assert chromosome.infix(primitives) == ['(x * x)', 'x']

    def test_flatten_and_split(self):
        chromosome = Chromosome(['+xx', '*xx', '-xx'], Linker.MAX)
        flat = chromosome.flatten()
        assert flat == '+xx*xx-xx'
        assert Chromosome.from_flat(flat, 3, Linker.MAX) == chromosome

    def test_copy_is_independent(self):
        chromosome = Chromosome(['+xx', '*xx'])
        chromosome.fitness = 0.5
        clone = chromosome.copy()
        clone.genes[0] = '-xx'
        assert chromosome.genes[0] == '+xx'
        assert clone.fitness == 0.5

    def test_new_chromosome_has_no_fitness(self):
        assert math.isnan(Chromosome(['+xx']).fitness)

    def test_json_file(self, tmp_path):
        chromosome = Chromosome(['+xx', '*xx'], Linker.MIN)
        chromosome.fitness = 0.25
        path = tmp_path / "best.json"
        chromosome.to_json(str(path))

        loaded = Chromosome.from_json(filename=str(path))
        assert loaded == chromosome
        assert loaded.fitness == 0.25

    def test_json_without_fitness(self):
        data = Chromosome(['+xx']).to_dict()
        assert data['fitness'] is None
        assert math.isnan(Chromosome.from_dict(data).fitness)
