"""
gep_evolution/fitness.py - Dataset binding and error-based fitness
"""
import logging
import math
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .chromosome import Chromosome
from .exceptions import ConfigurationError
from .gene import Evaluation
from .primitives import SATURATION, PrimitiveSet

logger = logging.getLogger(__name__)

ValuePair = Tuple[Sequence[float], float]
Dataset = List[ValuePair]


class FitnessEvaluator:
    """Scores chromosomes by cumulative absolute error over a dataset"""

    def __init__(self, primitives: PrimitiveSet):
        self.primitives = primitives

    def bind(self, inputs: Sequence[float]) -> Dict[str, float]:
        """Bind terminals positionally, in declaration order"""
        terminals = self.primitives.terminal_symbols
        if len(inputs) < len(terminals):
            raise ConfigurationError(
                f"Input vector {list(inputs)} has {len(inputs)} value(s) "
                f"for {len(terminals)} terminal(s)")
        return {symbol: float(value) for symbol, value in zip(terminals, inputs)}

    def check_dataset(self, dataset: Dataset) -> None:
        if not dataset:
            raise ConfigurationError("Dataset is empty")
        for inputs, _ in dataset:
            self.bind(inputs)

    def evaluate_inputs(self, chromosome: Chromosome, inputs: Sequence[float]) -> Evaluation:
        return chromosome.evaluate(self.primitives, self.bind(inputs))

    def predict(self, chromosome: Chromosome, inputs: Sequence[float]) -> float:
        """Predicted scalar; raises the typed failure if not evaluable"""
        return self.evaluate_inputs(chromosome, inputs).unwrap()

    def cumulative_error(self, chromosome: Chromosome, dataset: Dataset) -> float:
        """Sum of absolute errors, NaN if any row cannot be evaluated"""
        error = 0.0
        for inputs, target in dataset:
            result = self.evaluate_inputs(chromosome, inputs)
            if not result.ok:
                logger.debug("%s not evaluable at %s: %s", chromosome, list(inputs), result.error)
                return math.nan
            error += abs(result.value - target)
        return error

    def evaluate(self, chromosome: Chromosome, dataset: Dataset) -> float:
        """
        1 / cumulative error, capped at SATURATION. Returns 0 when the
        cumulative error is zero.
        """
        error = self.cumulative_error(chromosome, dataset)
        if math.isnan(error):
            fitness = math.nan
        elif error == 0:
            fitness = 0.0
        else:
            fitness = min(1.0 / error, SATURATION)
        chromosome.fitness = fitness
        return fitness

    def evaluate_population(self, chromosomes: List[Chromosome], dataset: Dataset) -> np.ndarray:
        return np.array([self.evaluate(c, dataset) for c in chromosomes], dtype=float)
