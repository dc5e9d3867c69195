"""
gep_evolution/cli.py - Command-line interface
"""
import logging
import random
import time

import click

from .chromosome import Chromosome, Linker
from .config import GEPConfig
from .engine import GeneExpressionProgram
from .exceptions import GEPError
from .primitives import PrimitiveSet


def parse_pair(text: str):
    """'x1,...,xn:target' -> ([x1, ..., xn], target)"""
    try:
        inputs, target = text.split(':')
        return [float(v) for v in inputs.split(',')], float(target)
    except ValueError:
        raise click.BadParameter(f"expected 'x1,...,xn:target', got {text!r}")


def build_primitives(functions: str, terminals: str) -> PrimitiveSet:
    return PrimitiveSet.from_symbols(functions, list(terminals))


@click.group()
def cli():
    """GEP Evolution - Gene Expression Programming for symbolic regression"""
    pass


@cli.command()
@click.option('--pair', '-d', 'pairs', multiple=True, required=True,
              help="Sample as 'x1,...,xn:target' (repeatable)")
@click.option('--functions', '-f', default='+-*/', help='Builtin function symbols')
@click.option('--terminals', '-t', default='x', help='Terminal symbols, bound in order')
@click.option('--head-length', default=8, help='Gene head length')
@click.option('--max-arity', default=2, help='Largest function arity (sizes the tail)')
@click.option('--genes', default=1, help='Genes per chromosome')
@click.option('--linker', type=click.Choice([linker.value for linker in Linker]), default='sum',
              help='Operation linking gene values')
@click.option('--mutation-prob', default=0.6, help='Per-gene mutation probability')
@click.option('--is-prob', default=0.1, help='IS transposition probability')
@click.option('--ris-prob', default=0.1, help='RIS transposition probability')
@click.option('--move-max-length', default=3, help='Longest transposed segment')
@click.option('--population', '-p', default=50, help='Population size')
@click.option('--generations', '-g', default=50, help='Number of generations to evolve')
@click.option('--raw-transposition', is_flag=True,
              help='Let transposition write anywhere in the gene')
@click.option('--seed', type=int, help='Random seed for a reproducible run')
@click.option('--out', '-o', help='Save the best chromosome as JSON')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def evolve(pairs, functions, terminals, head_length, max_arity, genes, linker,
           mutation_prob, is_prob, ris_prob, move_max_length, population,
           generations, raw_transposition, seed, out, verbose):
    """Evolve an expression approximating the given samples"""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')

    dataset = [parse_pair(p) for p in pairs]
    config = GEPConfig(
        head_length=head_length,
        max_arity=max_arity,
        num_genes=genes,
        linker=linker,
        mutation_prob=mutation_prob,
        is_prob=is_prob,
        ris_prob=ris_prob,
        move_max_length=move_max_length,
        population_size=population,
        generations=generations,
        preserve_domains=not raw_transposition,
    )

    try:
        primitives = build_primitives(functions, terminals)
        program = GeneExpressionProgram(config, primitives, random.Random(seed))
        click.echo(f"Starting evolution: {generations} generations, population {population}")
        start_time = time.time()
        result = program.run(dataset)
    except GEPError as e:
        raise click.ClickException(str(e))

    click.echo(f"\nEvolution completed in {time.time() - start_time:.1f}s")
    click.echo(f"Best fitness: {result.fitness:.6g} (initial {result.initial_fitness:.6g})")
    click.echo(f"Linker: {result.best.linker.value}")
    for kexpression, infix in zip(result.expressions, result.infix):
        click.echo(f"  {kexpression:<20} {infix}")

    if verbose:
        click.echo("\nX Y_P Y_T")
        for inputs, target in dataset:
            predicted = program.fitness.evaluate_inputs(result.best, inputs)
            shown = f"{predicted.value:.6g}" if predicted.ok else "n/a"
            click.echo(f"{inputs} {shown} {target}")

    if out:
        result.best.to_json(out)
        click.echo(f"Best chromosome saved: {out}")


@cli.command()
@click.option('--chromosome', '-c', required=True, help='Path to chromosome JSON file')
@click.option('--functions', '-f', default='+-*/', help='Builtin function symbols')
@click.option('--terminals', '-t', default='x', help='Terminal symbols, bound in order')
@click.option('--input', '-i', 'inputs', multiple=True, required=True,
              help="Input vector 'x1,...,xn' (repeatable)")
def evaluate(chromosome, functions, terminals, inputs):
    """Evaluate a saved chromosome at the given inputs"""
    try:
        c = Chromosome.from_json(filename=chromosome)
        primitives = build_primitives(functions, terminals)
        click.echo(f"Expression: {' {} '.format(c.linker.value).join(c.infix(primitives))}")
        program = GeneExpressionProgram(GEPConfig(max_arity=primitives.max_arity), primitives)
        for text in inputs:
            values = [float(v) for v in text.split(',')]
            click.echo(f"F({text}) = {program.evaluate(c, values):.6g}")
    except (GEPError, OSError) as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise click.BadParameter(str(e))


if __name__ == '__main__':
    cli()
