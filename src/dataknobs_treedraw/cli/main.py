"""treedraw CLI for drawing trees from files, stdin or expressions.

This module provides commands for:
- Drawing a tree read from a YAML, JSON or parenthesized expression source
- Reporting tree statistics (node count, depth, canvas width)
- Drawing a built-in sample tree
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

import click
import yaml
from dataknobs_common.serialization import serialize
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..exceptions import ConfigurationError, TreeDrawError
from ..parsing import FORMATS, load_tree, parse_tree
from ..render import DrawOptions, canvas_width, draw
from ..tree import Node

logger = logging.getLogger(__name__)

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Log layout and render details')
def cli(verbose: bool):
    """treedraw - draw trees as box-drawing diagrams"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s %(levelname)s %(message)s')


def _read_tree(source: str | None, expr: str | None, fmt: str) -> Node:
    if expr is not None:
        return parse_tree(expr, fmt=fmt)
    if source is None:
        raise click.UsageError('Provide a SOURCE file, "-" for stdin, or --expr')
    if source == '-':
        return parse_tree(click.get_text_stream('stdin').read(), fmt=fmt)
    return load_tree(source, fmt=fmt)


def _load_options_file(config_file: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(Path(config_file).read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f'Cannot parse options file: {e}', context={'config_file': config_file}
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            'Options file must contain a mapping', context={'config_file': config_file}
        )
    return data


def _resolve_options(config_file: str | None, **overrides: Any) -> DrawOptions:
    data = _load_options_file(config_file) if config_file else {}
    data.update({key: value for key, value in overrides.items() if value is not None})
    return DrawOptions.from_dict(data)


def _fail(message: str) -> None:
    console.print(f'[red]Error: {escape(message)}[/red]')
    sys.exit(1)


def _source_options(func):
    func = click.option(
        '--format', '-f', 'fmt', type=click.Choice(FORMATS), default='auto',
        help='Source format (default: by file suffix or content)'
    )(func)
    func = click.option('--expr', '-e', help="Tree expression, e.g. '(root a (b c))'")(func)
    func = click.argument('source', required=False)(func)
    return func


@cli.command(name='draw')
@_source_options
@click.option('--border/--no-border', default=None, help='Frame the diagram')
@click.option('--debug/--no-debug', 'debug_ruler', default=None, help='Append a column ruler')
@click.option('--padding', '-p', default=None, help='Padding unit for every node')
@click.option('--align-right/--no-align-right', default=None, help='Right-align labels')
@click.option('--max-label-width', type=click.IntRange(min=1), default=None,
              help='Truncate longer labels')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML or JSON file of draw options')
def draw_command(source, expr, fmt, border, debug_ruler, padding, align_right,
                 max_label_width, config_file):
    """Draw the tree in SOURCE (a file, or - for stdin)"""
    try:
        tree = _read_tree(source, expr, fmt)
        options = _resolve_options(
            config_file,
            border=border,
            debug=debug_ruler,
            padding=padding,
            align_right=align_right,
            max_label_width=max_label_width,
        )
        logger.debug('Draw options: %s', serialize(options))
        click.echo(draw(tree, options), nl=False)
    except (TreeDrawError, OSError) as e:
        _fail(str(e))


@cli.command()
@_source_options
def stats(source, expr, fmt):
    """Show statistics for the tree in SOURCE"""
    try:
        tree = _read_tree(source, expr, fmt)
    except (TreeDrawError, OSError) as e:
        _fail(str(e))
        return

    table = Table(title=f'Tree: {escape(tree.label)}')
    table.add_column('Metric', style='cyan')
    table.add_column('Value', style='green', justify='right')
    table.add_row('Nodes', str(1 + len(tree.get_all_descendants())))
    table.add_row('Children', str(tree.num_children))
    table.add_row('Leaves', str(len(tree.collect_terminal_nodes())))
    table.add_row('Max depth', str(tree.max_depth()))
    table.add_row('Canvas width', str(canvas_width(tree) + 1))
    console.print(table)


def build_sample_tree() -> Node:
    """A small three generation tree with grafted branches."""
    root = Node('root')
    child1 = Node('child1')
    child1.add_child(Node('grandchild1'))
    child1.add_child(Node('grandchild2')).new_child('greatgrandchild1')
    child1.add_child(Node('grandchild3')).new_child('greatgrandchild2')
    child2 = Node('child2')
    child2.new_child('grandchild4')
    child3 = Node('child3')
    child3.new_child('grandchild5')
    root.add_child(child1)
    root.add_child(child2)
    root.add_child(child3)
    return root


@cli.command()
@click.option('--border/--no-border', default=False, help='Frame the diagram')
@click.option('--debug/--no-debug', 'debug_ruler', default=False, help='Append a column ruler')
def demo(border, debug_ruler):
    """Draw a built-in sample tree"""
    click.echo(draw(build_sample_tree(), DrawOptions(border=border, debug=debug_ruler)), nl=False)


if __name__ == '__main__':
    cli()
