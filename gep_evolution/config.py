"""
gep_evolution/config.py - Engine configuration and up-front validation
"""
from dataclasses import dataclass, field
from typing import Optional, Union

from .chromosome import Linker
from .exceptions import ConfigurationError
from .primitives import PrimitiveSet


@dataclass
class GEPConfig:
    """Run parameters. Call validate() before use."""
    head_length: int = 8
    max_arity: int = 2
    num_genes: int = 1
    linker: Union[Linker, str] = Linker.SUM
    mutation_prob: float = 0.6
    is_prob: float = 0.1
    ris_prob: float = 0.1
    move_max_length: int = 3
    population_size: int = 50
    generations: int = 50
    # Keep transposed segments inside the head so tails stay terminal-only
    preserve_domains: bool = True
    log_every: int = 10
    max_init_attempts: int = field(default=10_000, repr=False)

    @property
    def tail_length(self) -> int:
        return self.head_length * (self.max_arity - 1) + 1

    @property
    def gene_length(self) -> int:
        return self.head_length + self.tail_length

    def validate(self, primitives: Optional[PrimitiveSet] = None) -> 'GEPConfig':
        """Check every field, coerce the linker, and return self"""
        self.linker = Linker.coerce(self.linker)

        for name in ('head_length', 'max_arity', 'num_genes', 'move_max_length',
                     'log_every', 'max_init_attempts'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        if self.population_size < 2:
            raise ConfigurationError(
                f"population_size must be at least 2, got {self.population_size}",
                "recombination needs two distinct parents")
        if self.generations < 0:
            raise ConfigurationError(f"generations must be >= 0, got {self.generations}")

        for name in ('mutation_prob', 'is_prob', 'ris_prob'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")

        if primitives is not None and primitives.max_arity > self.max_arity:
            raise ConfigurationError(
                f"max_arity {self.max_arity} is below the primitive set's "
                f"largest arity {primitives.max_arity}",
                "the tail would be too short to satisfy every head")
        return self
