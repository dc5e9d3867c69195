"""
Tests for mutation, IS/RIS transposition and recombination.

Property tests cover length and head/tail invariants over many seeds;
unit tests cover the edge cases (single gene, function-free RIS source).
"""

import random

from hypothesis import given, settings, strategies as st

from gep_evolution.chromosome import Chromosome
from gep_evolution.config import GEPConfig
from gep_evolution.operators import (
    apply_operators, gene_recombination, is_transpose, mutate,
    one_point_recombination, ris_transpose, two_point_recombination,
)
from gep_evolution.population import random_chromosome
from gep_evolution.primitives import PrimitiveSet

PRIMITIVES = PrimitiveSet.from_symbols('+-*/SU', ['x', 'y'])
CONFIG = GEPConfig(head_length=6, max_arity=2, num_genes=3, mutation_prob=1.0,
                   move_max_length=4, population_size=10).validate()
RAW_CONFIG = GEPConfig(head_length=6, max_arity=2, num_genes=3, mutation_prob=1.0,
                       move_max_length=4, population_size=10,
                       preserve_domains=False).validate()

seeds = st.integers(min_value=0, max_value=2**32 - 1)


def _valid(gene, config=CONFIG):
    return (len(gene) == config.gene_length
            and PRIMITIVES.is_function(gene[0])
            and all(PRIMITIVES.is_terminal(s) for s in gene[config.head_length:]))


def _chromosome(seed, config=CONFIG):
    return random_chromosome(config, PRIMITIVES, random.Random(seed))


class TestMutation:

    @given(seed=seeds)
    @settings(max_examples=100)
    def test_preserves_length_and_domains(self, seed):
        chromosome = _chromosome(seed)
        mutate(chromosome, CONFIG, PRIMITIVES, random.Random(seed + 1))
        assert len(chromosome) == CONFIG.num_genes
        assert all(_valid(g) for g in chromosome.genes)

    @given(seed=seeds)
    @settings(max_examples=50)
    def test_changes_at_most_one_position_per_gene(self, seed):
        chromosome = _chromosome(seed)
        before = list(chromosome.genes)
        mutate(chromosome, CONFIG, PRIMITIVES, random.Random(seed + 1))
        for old, new in zip(before, chromosome.genes):
            assert sum(a != b for a, b in zip(old, new)) <= 1

    def test_zero_probability_is_no_op(self):
        config = GEPConfig(head_length=6, num_genes=3, mutation_prob=0.0).validate()
        chromosome = _chromosome(1, config)
        before = list(chromosome.genes)
        mutate(chromosome, config, PRIMITIVES, random.Random(2))
        assert chromosome.genes == before


class TestISTransposition:

    @given(seed=seeds)
    @settings(max_examples=100)
    def test_preserves_length_and_domains(self, seed):
        chromosome = _chromosome(seed)
        is_transpose(chromosome, CONFIG, PRIMITIVES, random.Random(seed + 1))
        assert all(_valid(g) for g in chromosome.genes)

    @given(seed=seeds)
    @settings(max_examples=100)
    def test_raw_mode_preserves_length(self, seed):
        chromosome = _chromosome(seed, RAW_CONFIG)
        is_transpose(chromosome, RAW_CONFIG, PRIMITIVES, random.Random(seed + 1))
        assert all(len(g) == RAW_CONFIG.gene_length for g in chromosome.genes)

    @given(seed=seeds)
    @settings(max_examples=50)
    def test_only_one_gene_changes(self, seed):
        chromosome = _chromosome(seed)
        before = list(chromosome.genes)
        is_transpose(chromosome, CONFIG, PRIMITIVES, random.Random(seed + 1))
        assert sum(a != b for a, b in zip(before, chromosome.genes)) <= 1

    def test_single_gene_is_no_op(self):
        config = GEPConfig(head_length=6, num_genes=1).validate()
        chromosome = _chromosome(5, config)
        before = list(chromosome.genes)
        is_transpose(chromosome, config, PRIMITIVES, random.Random(0))
        assert chromosome.genes == before


class TestRISTransposition:

    def test_function_free_source_is_no_op(self):
        config = GEPConfig(head_length=2, max_arity=2, num_genes=2,
                           move_max_length=3).validate()
        for seed in range(200):
            chromosome = Chromosome(['xxxxx', 'yyyyy'])
            ris_transpose(chromosome, config, PRIMITIVES, random.Random(seed))
            assert chromosome.genes == ['xxxxx', 'yyyyy']

    @given(seed=seeds)
    @settings(max_examples=100)
    def test_inserted_segment_starts_with_function(self, seed):
        chromosome = _chromosome(seed)
        before = list(chromosome.genes)
        ris_transpose(chromosome, CONFIG, PRIMITIVES, random.Random(seed + 1))

        assert all(_valid(g) for g in chromosome.genes)
        for old, new in zip(before, chromosome.genes):
            if old != new:
                assert PRIMITIVES.is_function(new[0])
                assert new[CONFIG.head_length:] == old[CONFIG.head_length:]

    @given(seed=seeds)
    @settings(max_examples=100)
    def test_raw_mode_preserves_length(self, seed):
        chromosome = _chromosome(seed, RAW_CONFIG)
        ris_transpose(chromosome, RAW_CONFIG, PRIMITIVES, random.Random(seed + 1))
        assert all(len(g) == RAW_CONFIG.gene_length for g in chromosome.genes)


class TestRecombination:

    RECOMBINATIONS = (one_point_recombination, two_point_recombination, gene_recombination)

    @given(seed=seeds)
    @settings(max_examples=100)
    def test_positions_are_exchanged_not_moved(self, seed):
        rng = random.Random(seed)
        for recombine in self.RECOMBINATIONS:
            parent1, parent2 = _chromosome(rng.randrange(2**32)), _chromosome(rng.randrange(2**32))
            flat1, flat2 = parent1.flatten(), parent2.flatten()

            child1, child2 = recombine(parent1, parent2, rng)

            assert len(child1.flatten()) + len(child2.flatten()) == len(flat1) + len(flat2)
            for p, (a, b) in enumerate(zip(child1.flatten(), child2.flatten())):
                assert sorted((a, b)) == sorted((flat1[p], flat2[p]))
            assert all(_valid(g) for g in child1.genes + child2.genes)
            # Parents are left untouched
            assert parent1.flatten() == flat1 and parent2.flatten() == flat2

    def test_one_point_exchanges_suffix(self):
        parent1 = Chromosome(['+xx', '*xx'])
        parent2 = Chromosome(['-yy', '/yy'])
        child1, child2 = one_point_recombination(parent1, parent2, random.Random(0))
        cut = next((i for i, c in enumerate(child1.flatten()) if c != parent1.flatten()[i]), 6)
        assert child1.flatten() == parent1.flatten()[:cut] + parent2.flatten()[cut:]
        assert child2.flatten() == parent2.flatten()[:cut] + parent1.flatten()[cut:]

    def test_two_point_on_shortest_chromosome(self):
        parent1, parent2 = Chromosome(['Ux']), Chromosome(['Sy'])
        child1, child2 = two_point_recombination(parent1, parent2, random.Random(0))
        assert child1.genes == ['Sx']
        assert child2.genes == ['Uy']

    def test_gene_recombination_swaps_one_gene(self):
        parent1 = Chromosome(['+xx', '*xx', '-xx'])
        parent2 = Chromosome(['+yy', '*yy', '-yy'])
        child1, child2 = gene_recombination(parent1, parent2, random.Random(4))
        swapped = [i for i in range(3) if child1.genes[i] != parent1.genes[i]]
        assert len(swapped) == 1
        i = swapped[0]
        assert child1.genes[i] == parent2.genes[i]
        assert child2.genes[i] == parent1.genes[i]

    def test_children_keep_linker(self):
        parent1 = Chromosome(['+xx'], 'max')
        parent2 = Chromosome(['*yy'], 'max')
        for recombine in self.RECOMBINATIONS:
            child1, child2 = recombine(parent1, parent2, random.Random(1))
            assert child1.linker is parent1.linker and child2.linker is parent1.linker


class TestApplyOperators:

    @given(seed=seeds)
    @settings(max_examples=30)
    def test_generation_keeps_population_shape(self, seed):
        rng = random.Random(seed)
        config = GEPConfig(head_length=6, max_arity=2, num_genes=3, mutation_prob=0.5,
                           is_prob=0.5, ris_prob=0.5, population_size=8).validate()
        chromosomes = [random_chromosome(config, PRIMITIVES, rng) for _ in range(8)]

        apply_operators(chromosomes, config, PRIMITIVES, rng)

        assert len(chromosomes) == 8
        for chromosome in chromosomes:
            assert len(chromosome) == config.num_genes
            assert all(_valid(g, config) for g in chromosome.genes)
