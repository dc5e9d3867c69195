"""
gep_evolution/operators.py - Structure-preserving genetic operators

Every operator keeps gene and chromosome lengths fixed. Mutation and
transposition work in place on one chromosome; recombination returns two
children built from two parents.
"""
import logging
import random
from typing import List, Tuple

from .chromosome import Chromosome
from .config import GEPConfig
from .primitives import PrimitiveSet

logger = logging.getLogger(__name__)

# Random start positions tried by RIS before giving up
RIS_MAX_ATTEMPTS = 10


def _replace_at(gene: str, index: int, symbol: str) -> str:
    return gene[:index] + symbol + gene[index + 1:]


def _overwrite(gene: str, offset: int, segment: str) -> str:
    return gene[:offset] + segment + gene[offset + len(segment):]


def _segment_length(config: GEPConfig, gene_length: int, rng: random.Random) -> int:
    return min(rng.randint(1, config.move_max_length), gene_length)


def mutate(chromosome: Chromosome, config: GEPConfig, primitives: PrimitiveSet,
           rng: random.Random) -> Chromosome:
    """Point mutation: each gene, with probability mutation_prob, gets one new symbol"""
    for i, gene in enumerate(chromosome.genes):
        if rng.random() >= config.mutation_prob:
            continue

        index = rng.randrange(len(gene))
        if index == 0:
            symbol = rng.choice(primitives.function_symbols)
        elif index < config.head_length:
            symbol = rng.choice(primitives.head_symbols)
        else:
            symbol = rng.choice(primitives.terminal_symbols)

        chromosome.genes[i] = _replace_at(gene, index, symbol)
        logger.debug("Mutated gene %d at %d: %s -> %s", i, index, gene, chromosome.genes[i])
    return chromosome


def is_transpose(chromosome: Chromosome, config: GEPConfig, primitives: PrimitiveSet,
                 rng: random.Random) -> Chromosome:
    """Insertion sequence: copy a random segment of one gene into another"""
    genes = chromosome.genes
    if len(genes) < 2:
        return chromosome

    source, target = rng.sample(range(len(genes)), 2)
    source_gene, target_gene = genes[source], genes[target]

    length = _segment_length(config, len(source_gene), rng)
    start = rng.randrange(len(source_gene) - length + 1)
    segment = source_gene[start:start + length]

    if config.preserve_domains:
        # Only head positions after the root may be overwritten
        if config.head_length < 2:
            return chromosome
        offset = rng.randrange(1, config.head_length)
        segment = segment[:config.head_length - offset]
    else:
        offset = rng.randrange(len(target_gene) - length + 1)

    genes[target] = _overwrite(target_gene, offset, segment)
    logger.debug("IS transposed %r from gene %d into gene %d at %d",
                 segment, source, target, offset)
    return chromosome


def ris_transpose(chromosome: Chromosome, config: GEPConfig, primitives: PrimitiveSet,
                  rng: random.Random) -> Chromosome:
    """Root insertion sequence: copy a segment starting on a function to the target's root"""
    genes = chromosome.genes
    if len(genes) < 2:
        return chromosome

    source, target = rng.sample(range(len(genes)), 2)
    source_gene, target_gene = genes[source], genes[target]

    length = _segment_length(config, len(source_gene), rng)
    if config.preserve_domains:
        length = min(length, config.head_length)

    for _ in range(RIS_MAX_ATTEMPTS):
        start = rng.randrange(len(source_gene))
        if primitives.is_function(source_gene[start]):
            break
    else:
        logger.debug("RIS found no function in gene %d, skipped", source)
        return chromosome

    segment = source_gene[start:start + length]
    genes[target] = _overwrite(target_gene, 0, segment)
    logger.debug("RIS transposed %r from gene %d to the root of gene %d",
                 segment, source, target)
    return chromosome


def _children(first: str, second: str, parent: Chromosome) -> Tuple[Chromosome, Chromosome]:
    return (Chromosome.from_flat(first, parent.gene_length, parent.linker),
            Chromosome.from_flat(second, parent.gene_length, parent.linker))


def one_point_recombination(parent1: Chromosome, parent2: Chromosome,
                            rng: random.Random) -> Tuple[Chromosome, Chromosome]:
    """Exchange everything after one cut of the flattened chromosomes"""
    flat1, flat2 = parent1.flatten(), parent2.flatten()
    cut = rng.randrange(len(flat1))
    return _children(flat1[:cut] + flat2[cut:], flat2[:cut] + flat1[cut:], parent1)


def two_point_recombination(parent1: Chromosome, parent2: Chromosome,
                            rng: random.Random) -> Tuple[Chromosome, Chromosome]:
    """Exchange the segment between two cuts of the flattened chromosomes"""
    flat1, flat2 = parent1.flatten(), parent2.flatten()
    total = len(flat1)
    first = rng.randrange(max(total - 2, 1))
    second = rng.randrange(first + 1, total)
    return _children(flat1[:first] + flat2[first:second] + flat1[second:],
                     flat2[:first] + flat1[first:second] + flat2[second:],
                     parent1)


def gene_recombination(parent1: Chromosome, parent2: Chromosome,
                       rng: random.Random) -> Tuple[Chromosome, Chromosome]:
    """Swap one whole gene between the parents"""
    index = rng.randrange(len(parent1.genes))
    child1, child2 = parent1.copy(), parent2.copy()
    child1.genes[index], child2.genes[index] = parent2.genes[index], parent1.genes[index]
    return child1, child2


RECOMBINATIONS = (
    one_point_recombination,
    two_point_recombination,
    gene_recombination,
)


def apply_operators(chromosomes: List[Chromosome], config: GEPConfig,
                    primitives: PrimitiveSet, rng: random.Random) -> None:
    """One generation of variation, applied to the population in place"""
    for chromosome in chromosomes:
        mutate(chromosome, config, primitives, rng)
        if rng.random() < config.is_prob:
            is_transpose(chromosome, config, primitives, rng)
        if rng.random() < config.ris_prob:
            ris_transpose(chromosome, config, primitives, rng)

    for recombine in RECOMBINATIONS:
        first, second = rng.sample(range(len(chromosomes)), 2)
        chromosomes[first], chromosomes[second] = recombine(
            chromosomes[first], chromosomes[second], rng)
        logger.debug("%s on slots %d and %d", recombine.__name__, first, second)
