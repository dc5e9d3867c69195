"""
gep_evolution/population.py - Population initialization, roulette selection and statistics
"""
import logging
import random
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .chromosome import Chromosome
from .config import GEPConfig
from .exceptions import ConfigurationError, InvalidExpression
from .gene import kexpression_length
from .primitives import PrimitiveSet

logger = logging.getLogger(__name__)


def random_gene(config: GEPConfig, primitives: PrimitiveSet, rng: random.Random) -> str:
    """Function at the root, functions or terminals in the head, terminals in the tail"""
    symbols = [rng.choice(primitives.function_symbols)]
    symbols.extend(rng.choice(primitives.head_symbols) for _ in range(1, config.head_length))
    symbols.extend(rng.choice(primitives.terminal_symbols) for _ in range(config.tail_length))
    return ''.join(symbols)


def random_chromosome(config: GEPConfig, primitives: PrimitiveSet,
                      rng: random.Random) -> Chromosome:
    genes = [random_gene(config, primitives, rng) for _ in range(config.num_genes)]
    return Chromosome(genes, config.linker)


def selection_weights(fitness: Sequence[float]) -> np.ndarray:
    """Fitness as roulette weights; NaN, infinite and negative values weigh nothing"""
    weights = np.asarray(fitness, dtype=float).copy()
    weights[~np.isfinite(weights) | (weights < 0)] = 0.0
    return weights


def roulette_select(chromosomes: List[Chromosome], fitness: Sequence[float],
                    rng: random.Random, count: Optional[int] = None) -> List[Chromosome]:
    """Fitness-proportionate selection with replacement; returns copies"""
    if count is None:
        count = len(chromosomes)

    cumulative = np.cumsum(selection_weights(fitness))
    total = cumulative[-1] if len(cumulative) else 0.0

    selected = []
    for _ in range(count):
        if total <= 0:
            # Nothing to be proportional to
            index = rng.randrange(len(chromosomes))
        else:
            pick = rng.random() * total
            index = min(int(np.searchsorted(cumulative, pick, side='right')),
                        len(chromosomes) - 1)
        selected.append(chromosomes[index].copy())
    return selected


class Population:
    """Fixed-size collection of chromosomes for one run"""

    def __init__(self, config: GEPConfig, primitives: PrimitiveSet,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.primitives = primitives
        self.rng = rng or random.Random()
        self.chromosomes: List[Chromosome] = []
        self.generation = 0

    @property
    def size(self) -> int:
        return len(self.chromosomes)

    def generate_chromosome(self) -> Chromosome:
        """Random chromosome that evaluates under the all-zero binding"""
        binding = self.primitives.zero_binding()
        for attempt in range(1, self.config.max_init_attempts + 1):
            candidate = random_chromosome(self.config, self.primitives, self.rng)
            result = candidate.evaluate(self.primitives, binding)
            if result.ok:
                return candidate
            logger.debug("Discarded candidate %s (attempt %d): %s",
                         candidate, attempt, result.error)
        raise ConfigurationError(
            f"No valid chromosome after {self.config.max_init_attempts} attempts",
            "check that the primitive set can be evaluated at zero")

    def initialize(self) -> 'Population':
        self.chromosomes = [self.generate_chromosome()
                            for _ in range(self.config.population_size)]
        self.generation = 0
        logger.info("Initialized population of %d chromosomes", self.size)
        return self

    def select(self, fitness: Sequence[float]) -> None:
        """Replace the population by a roulette-selected generation"""
        self.chromosomes = roulette_select(self.chromosomes, fitness, self.rng,
                                           self.config.population_size)
        self.generation += 1

    def best_index(self, fitness: Sequence[float]) -> int:
        """Index of the highest finite fitness, 0 if none is finite"""
        values = np.asarray(fitness, dtype=float)
        finite = np.isfinite(values)
        if not finite.any():
            return 0
        return int(np.argmax(np.where(finite, values, -np.inf)))

    def get_stats(self, fitness: Sequence[float]) -> Dict[str, Any]:
        """Population statistics for progress reporting"""
        values = np.asarray(fitness, dtype=float)
        finite = values[np.isfinite(values)]

        lengths = []
        for chromosome in self.chromosomes:
            for gene in chromosome.genes:
                try:
                    lengths.append(kexpression_length(gene, self.primitives))
                except InvalidExpression:
                    pass

        stats = {
            'generation': self.generation,
            'population_size': self.size,
            'invalid': int(len(values) - len(finite)),
            'kexpression_length': float(np.mean(lengths)) if lengths else 0.0,
        }
        if len(finite):
            stats['fitness'] = {
                'min': float(np.min(finite)),
                'max': float(np.max(finite)),
                'mean': float(np.mean(finite)),
                'std': float(np.std(finite)),
            }
        else:
            stats['fitness'] = {'min': 0.0, 'max': 0.0, 'mean': 0.0, 'std': 0.0}
        return stats
