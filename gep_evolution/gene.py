"""
gep_evolution/gene.py - Gene codec: K-expression decoding and evaluation

A gene is the breadth-first layout of an expression tree. Only the leading
K-expression is meaningful; symbols after it are junk that is kept for
future variation but never evaluated.
"""
import math
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .exceptions import DomainError, GEPError, InvalidExpression
from .primitives import INFIX_SYMBOLS, Function, PrimitiveSet


@dataclass(frozen=True)
class Evaluation:
    """Either a numeric value or the typed failure that prevented one"""
    value: float = math.nan
    error: Optional[GEPError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: float) -> 'Evaluation':
        return cls(value=value)

    @classmethod
    def failure(cls, error: GEPError) -> 'Evaluation':
        return cls(error=error)

    def unwrap(self) -> float:
        """Return the value or raise the carried failure"""
        if self.error is not None:
            raise self.error
        return self.value


def kexpression_length(gene: str, primitives: PrimitiveSet) -> int:
    """Length of the valid prefix of a gene"""
    required = 1
    for index, symbol in enumerate(gene):
        primitive = primitives.get(symbol)
        if primitive is None:
            raise InvalidExpression(f"Unknown symbol {symbol!r} at position {index}")
        if isinstance(primitive, Function):
            required += primitive.arity - 1
        else:
            required -= 1
        if required == 0:
            return index + 1
    raise InvalidExpression(
        f"Gene {gene!r} ends with {required} argument(s) still required")


def decode(gene: str, primitives: PrimitiveSet) -> str:
    """Trim a gene to its K-expression"""
    return gene[:kexpression_length(gene, primitives)]


def _operand_offsets(kexpression: str, primitives: PrimitiveSet) -> List[int]:
    # Operands of the symbol at i sit at offsets[i] .. offsets[i] + arity - 1
    offsets = []
    cursor = 1
    for symbol in kexpression:
        offsets.append(cursor)
        cursor += primitives.arity(symbol)
    return offsets


def _reduce(kexpression: str, primitives: PrimitiveSet, leaf, node) -> object:
    """Fold a K-expression from its last position back to the root"""
    length = len(kexpression)
    offsets = _operand_offsets(kexpression, primitives)
    slots: list = [None] * length

    for index in range(length - 1, -1, -1):
        primitive = primitives.get(kexpression[index])
        if isinstance(primitive, Function):
            start = offsets[index]
            if start + primitive.arity > length:
                raise InvalidExpression(
                    f"{primitive.symbol!r} at position {index} is missing operands")
            slots[index] = node(primitive, slots[start:start + primitive.arity])
        else:
            slots[index] = leaf(primitive.symbol)

    return slots[0]


def evaluate_kexpression(kexpression: str, primitives: PrimitiveSet,
                         binding: Mapping[str, float]) -> float:
    """Evaluate an already-decoded K-expression. Raises on failure."""
    def leaf(symbol):
        if symbol not in binding:
            raise InvalidExpression(f"Terminal {symbol!r} has no bound value")
        return float(binding[symbol])

    return _reduce(kexpression, primitives, leaf, lambda f, args: f.apply(args))


def evaluate_gene(gene: str, primitives: PrimitiveSet,
                  binding: Mapping[str, float]) -> Evaluation:
    """Decode and evaluate a gene against one value binding"""
    try:
        kexpression = decode(gene, primitives)
        return Evaluation.success(evaluate_kexpression(kexpression, primitives, binding))
    except (InvalidExpression, DomainError) as e:
        return Evaluation.failure(e)


def to_infix(gene: str, primitives: PrimitiveSet) -> str:
    """Render the K-expression of a gene in readable infix form"""
    def node(function, args):
        if function.arity == 2 and function.symbol in INFIX_SYMBOLS:
            return f"({args[0]} {function.symbol} {args[1]})"
        return f"{function.name}({', '.join(args)})"

    return _reduce(decode(gene, primitives), primitives, lambda s: s, node)
