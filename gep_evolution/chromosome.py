"""
gep_evolution/chromosome.py - Multigenic chromosome, linker and JSON serialization
"""
import json
import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Union

from .exceptions import ConfigurationError
from .gene import Evaluation, decode, evaluate_gene, to_infix
from .primitives import PrimitiveSet


class Linker(Enum):
    """Operation combining per-gene values into one scalar"""
    SUM = 'sum'
    MAX = 'max'
    MIN = 'min'

    @classmethod
    def coerce(cls, value: Union['Linker', str]) -> 'Linker':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for linker in cls:
                if value.lower() in (linker.value, linker.name.lower()):
                    return linker
        raise ConfigurationError(f"Unknown linker: {value!r}",
                                 "use one of sum, max, min")

    def combine(self, values: List[float]) -> float:
        if self is Linker.SUM:
            return sum(values)
        if self is Linker.MAX:
            return max(values)
        return min(values)


class Chromosome:
    """A fixed number of equal-length genes joined by a linker"""

    def __init__(self, genes: List[str], linker: Union[Linker, str] = Linker.SUM):
        self.genes = list(genes)
        self.linker = Linker.coerce(linker)
        self.fitness = math.nan

    @property
    def gene_length(self) -> int:
        return len(self.genes[0]) if self.genes else 0

    def evaluate(self, primitives: PrimitiveSet, binding: Mapping[str, float]) -> Evaluation:
        """Evaluate every gene and link the results"""
        values = []
        for gene in self.genes:
            result = evaluate_gene(gene, primitives, binding)
            if not result.ok:
                return result
            values.append(result.value)
        return Evaluation.success(self.linker.combine(values))

    def decode(self, primitives: PrimitiveSet) -> List[str]:
        """K-expression of every gene"""
        return [decode(gene, primitives) for gene in self.genes]

    def infix(self, primitives: PrimitiveSet) -> List[str]:
        return [to_infix(gene, primitives) for gene in self.genes]

    def flatten(self) -> str:
        return ''.join(self.genes)

    @classmethod
    def from_flat(cls, flat: str, gene_length: int,
                  linker: Union[Linker, str] = Linker.SUM) -> 'Chromosome':
        """Re-split a flattened chromosome into fixed-length genes"""
        genes = [flat[i:i + gene_length] for i in range(0, len(flat), gene_length)]
        return cls(genes, linker)

    def copy(self) -> 'Chromosome':
        new_chromosome = Chromosome(self.genes, self.linker)
        new_chromosome.fitness = self.fitness
        return new_chromosome

    def to_dict(self) -> Dict[str, Any]:
        return {
            'genes': list(self.genes),
            'linker': self.linker.value,
            'fitness': None if math.isnan(self.fitness) else self.fitness,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Chromosome':
        chromosome = cls(data['genes'], data.get('linker', Linker.SUM.value))
        fitness = data.get('fitness')
        chromosome.fitness = math.nan if fitness is None else float(fitness)
        return chromosome

    def to_json(self, filename: str = None) -> str:
        """Serialize to JSON string or file"""
        json_str = json.dumps(self.to_dict(), indent=2)
        if filename:
            with open(filename, 'w') as f:
                f.write(json_str)
        return json_str

    @classmethod
    def from_json(cls, json_data: str = None, filename: str = None) -> 'Chromosome':
        """Deserialize from JSON string or file"""
        if filename:
            with open(filename, 'r') as f:
                json_data = f.read()
        return cls.from_dict(json.loads(json_data))

    def __eq__(self, other):
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.genes == other.genes and self.linker is other.linker

    def __len__(self):
        return len(self.genes)

    def __repr__(self):
        return f"Chromosome({self.genes!r}, linker={self.linker.name})"

    def __str__(self):
        return f"{self.linker.name}[{' | '.join(self.genes)}]"
