"""
gep_evolution - Gene Expression Programming for symbolic regression

Expressions are encoded as fixed-length linear chromosomes (head/tail genes),
decoded into K-expressions and evolved toward sampled input/output pairs.
"""

__version__ = "0.1.0"
__author__ = "GEP Evolution Project"

from .exceptions import GEPError, InvalidExpression, DomainError, ConfigurationError
from .primitives import (
    Function, Terminal, PrimitiveSet, BUILTIN_FUNCTIONS,
    ADD, SUBTRACT, MULTIPLY, DIVIDE, UNARY_MINUS, ABS, POWER, SQRT, SIGN
)
from .gene import Evaluation, decode, evaluate_gene, kexpression_length, to_infix
from .chromosome import Chromosome, Linker
from .config import GEPConfig
from .fitness import FitnessEvaluator
from .population import Population, roulette_select
from .operators import (
    mutate, is_transpose, ris_transpose,
    one_point_recombination, two_point_recombination, gene_recombination,
    apply_operators
)
from .engine import GeneExpressionProgram, RunResult

__all__ = [
    'GEPError', 'InvalidExpression', 'DomainError', 'ConfigurationError',
    'Function', 'Terminal', 'PrimitiveSet', 'BUILTIN_FUNCTIONS',
    'ADD', 'SUBTRACT', 'MULTIPLY', 'DIVIDE', 'UNARY_MINUS', 'ABS', 'POWER', 'SQRT', 'SIGN',
    'Evaluation', 'decode', 'evaluate_gene', 'kexpression_length', 'to_infix',
    'Chromosome', 'Linker',
    'GEPConfig',
    'FitnessEvaluator',
    'Population', 'roulette_select',
    'mutate', 'is_transpose', 'ris_transpose',
    'one_point_recombination', 'two_point_recombination', 'gene_recombination',
    'apply_operators',
    'GeneExpressionProgram', 'RunResult'
]
