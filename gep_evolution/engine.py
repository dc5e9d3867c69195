"""
gep_evolution/engine.py - Evolution driver
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .chromosome import Chromosome
from .config import GEPConfig
from .fitness import Dataset, FitnessEvaluator
from .operators import apply_operators
from .population import Population
from .primitives import PrimitiveSet

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Best chromosome of a run and how it was reached"""
    best: Chromosome
    fitness: float
    expressions: List[str]
    infix: List[str]
    initial_best: Chromosome
    initial_fitness: float
    history: List[float] = field(default_factory=list)


class GeneExpressionProgram:
    """Evolves chromosomes toward a dataset for a fixed number of generations"""

    def __init__(self, config: GEPConfig, primitives: PrimitiveSet,
                 rng: Optional[random.Random] = None):
        self.config = config.validate(primitives)
        self.primitives = primitives
        self.rng = rng or random.Random()
        self.fitness = FitnessEvaluator(primitives)

    def run(self, dataset: Dataset,
            callback: Optional[Callable[[int, Dict[str, Any]], None]] = None) -> RunResult:
        self.fitness.check_dataset(dataset)
        config = self.config

        logger.info("Evolving %d chromosomes (%d gene(s) of length %d) for %d generations",
                    config.population_size, config.num_genes, config.gene_length,
                    config.generations)

        population = Population(config, self.primitives, self.rng).initialize()
        scores = self.fitness.evaluate_population(population.chromosomes, dataset)
        best = population.chromosomes[population.best_index(scores)].copy()
        best_fitness = best.fitness
        initial_best, initial_fitness = best.copy(), best_fitness
        history = []

        for generation in range(config.generations):
            apply_operators(population.chromosomes, config, self.primitives, self.rng)
            scores = self.fitness.evaluate_population(population.chromosomes, dataset)

            candidate = population.chromosomes[population.best_index(scores)]
            if self._improves(candidate.fitness, best_fitness):
                best, best_fitness = candidate.copy(), candidate.fitness
                logger.info("Generation %d: new best %.6g %s",
                            generation, best_fitness, best.decode(self.primitives))
            history.append(best_fitness)

            if callback is not None or generation % config.log_every == 0:
                stats = population.get_stats(scores)
                if callback is not None:
                    callback(generation, stats)
                if generation % config.log_every == 0:
                    logger.info("Generation %d: max=%.6g mean=%.6g invalid=%d",
                                generation, stats['fitness']['max'],
                                stats['fitness']['mean'], stats['invalid'])

            population.select(scores)

        return RunResult(
            best=best,
            fitness=best_fitness,
            expressions=best.decode(self.primitives),
            infix=best.infix(self.primitives),
            initial_best=initial_best,
            initial_fitness=initial_fitness,
            history=history,
        )

    @staticmethod
    def _improves(candidate: float, best: float) -> bool:
        if math.isnan(candidate):
            return False
        return math.isnan(best) or candidate > best

    def evaluate(self, chromosome: Chromosome, inputs: Sequence[float]) -> float:
        """Predicted value of a chromosome for one input vector"""
        return self.fitness.predict(chromosome, inputs)
