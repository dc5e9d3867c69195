"""
gep_evolution/primitives.py - Primitive functions, terminals and the lookup table
"""
import math
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from .exceptions import ConfigurationError, DomainError

# Division by zero saturates to this value instead of failing
SATURATION = sys.float_info.max


@dataclass(frozen=True)
class Function:
    """A primitive function: symbol, arity and evaluation rule"""
    symbol: str
    name: str
    arity: int
    rule: Callable[..., float]

    def apply(self, operands: List[float]) -> float:
        return self.rule(*operands)

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class Terminal:
    """A terminal symbol resolved from a value binding"""
    symbol: str

    def __str__(self):
        return self.symbol


Primitive = Union[Function, Terminal]


# Evaluation rules
def _add(a: float, b: float) -> float:
    return a + b


def _subtract(a: float, b: float) -> float:
    return a - b


def _multiply(a: float, b: float) -> float:
    return a * b


def _divide(a: float, b: float) -> float:
    if b == 0:
        return SATURATION
    return a / b


def _negate(a: float) -> float:
    return -a


def _abs(a: float) -> float:
    return abs(a)


def _power(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.inf
    except ValueError:
        raise DomainError(f"power undefined for base {a} and exponent {b}")


def _sqrt(a: float) -> float:
    if a < 0:
        raise DomainError("negative square root")
    return math.sqrt(a)


def _sign(a: float) -> float:
    return 1.0 if a >= 0 else -1.0


ADD = Function('+', 'add', 2, _add)
SUBTRACT = Function('-', 'sub', 2, _subtract)
MULTIPLY = Function('*', 'mul', 2, _multiply)
DIVIDE = Function('/', 'div', 2, _divide)
UNARY_MINUS = Function('U', 'neg', 1, _negate)
ABS = Function('A', 'abs', 1, _abs)
POWER = Function('P', 'pow', 2, _power)
SQRT = Function('S', 'sqrt', 1, _sqrt)
SIGN = Function('H', 'sign', 1, _sign)

BUILTIN_FUNCTIONS: Mapping[str, Function] = MappingProxyType({
    f.symbol: f for f in (ADD, SUBTRACT, MULTIPLY, DIVIDE,
                          UNARY_MINUS, ABS, POWER, SQRT, SIGN)
})

# Symbols rendered infix by to_infix
INFIX_SYMBOLS = frozenset('+-*/')


class PrimitiveSet:
    """Immutable catalog of functions and terminals keyed by symbol"""

    def __init__(self, functions: Iterable[Function], terminals: Iterable[str]):
        functions = list(functions)
        terminals = list(terminals)

        if not functions:
            raise ConfigurationError("Primitive set needs at least one function")
        if not terminals:
            raise ConfigurationError("Primitive set needs at least one terminal")

        table: Dict[str, Primitive] = {}
        for primitive in functions + [Terminal(t) for t in terminals]:
            symbol = primitive.symbol
            if len(symbol) != 1:
                raise ConfigurationError(
                    f"Symbol {symbol!r} must be a single character")
            if symbol in table:
                raise ConfigurationError(
                    f"Symbol {symbol!r} is declared more than once",
                    "function and terminal symbols must be disjoint")
            if isinstance(primitive, Function) and primitive.arity < 1:
                raise ConfigurationError(
                    f"Function {symbol!r} has arity {primitive.arity}, expected >= 1")
            table[symbol] = primitive

        self._table = MappingProxyType(table)
        self.function_symbols = tuple(f.symbol for f in functions)
        self.terminal_symbols = tuple(terminals)
        self.max_arity = max(f.arity for f in functions)

    @classmethod
    def from_symbols(cls, function_symbols: str, terminals: Iterable[str]) -> 'PrimitiveSet':
        """Build a set from builtin function symbols, e.g. '+-*/'"""
        unknown = [s for s in function_symbols if s not in BUILTIN_FUNCTIONS]
        if unknown:
            raise ConfigurationError(
                f"Unknown function symbols: {''.join(unknown)}",
                f"choose from {''.join(BUILTIN_FUNCTIONS)}")
        return cls([BUILTIN_FUNCTIONS[s] for s in function_symbols], terminals)

    def get(self, symbol: str) -> Optional[Primitive]:
        return self._table.get(symbol)

    def is_function(self, symbol: str) -> bool:
        return isinstance(self._table.get(symbol), Function)

    def is_terminal(self, symbol: str) -> bool:
        return isinstance(self._table.get(symbol), Terminal)

    def arity(self, symbol: str) -> int:
        """Arity of a symbol; terminals have arity 0"""
        primitive = self._table.get(symbol)
        return primitive.arity if isinstance(primitive, Function) else 0

    @property
    def head_symbols(self) -> tuple:
        return self.function_symbols + self.terminal_symbols

    def zero_binding(self) -> Dict[str, float]:
        """Binding with every terminal set to 0, used to validate new chromosomes"""
        return {t: 0.0 for t in self.terminal_symbols}

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self):
        return (f"PrimitiveSet(functions={''.join(self.function_symbols)!r}, "
                f"terminals={''.join(self.terminal_symbols)!r})")
