#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for BubbleWeaver.

This module provides the main CLI entry point and all subcommands for
finding ultrabubbles in GFA sequence graphs.
"""

import signal
import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.parser import ConfigParser, ConfigValidationError
from .config.schema import (
    VALID_HAIRPIN_POLICIES,
    VALID_OUTPUT_FORMATS,
    save_config_template,
    validate_config,
)
from .graph_core.errors import (
    GraphInputError,
    GraphResourceError,
    InternalConsistencyError,
    PipelineCancelled,
)
from .graph_core.selection import select_paths, select_segments
from .io_utils.gfa_reader import GFAFormatError, load_gfa
from .io_utils.bubble_export import write_bubbles_bed, write_bubbles_json, write_bubbles_text
from .io_utils.gfa_writer import write_gfa
from .utils.pipeline import BubblePipeline, CancellationToken, configure_logging
from .utils.sequence_utils import oriented_sequence

EXIT_INPUT_ERROR = 1
EXIT_INTERNAL_ERROR = 2
EXIT_RESOURCE_ERROR = 3
EXIT_CANCELLED = 130


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    BubbleWeaver: Ultrabubble Finder for Sequence Graphs

    Builds the cactus graph of a GFA v1 graph and reports its nested
    ultrabubbles as a tree.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


def _setup_logging(ctx, config=None):
    """Configure logging from the global flags, falling back to the config."""
    log_config = (config or {}).get('output', {}).get('logging', {})
    if ctx.obj.get('QUIET'):
        level = 'ERROR'
    elif ctx.obj.get('VERBOSE'):
        level = 'DEBUG'
    else:
        level = log_config.get('level', 'INFO')
    configure_logging(level=level, log_file=log_config.get('log_file'))


def _load_graph(ctx, gfa_file):
    """Load a GFA file, exiting with an input error code on failure."""
    try:
        return load_gfa(Path(gfa_file))
    except (GFAFormatError, GraphInputError, FileNotFoundError) as e:
        click.echo(f"✗ Error loading {gfa_file}: {e}", err=True)
        ctx.exit(EXIT_INPUT_ERROR)


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='bubbleweaver_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t',
              type=click.Choice(['default', 'parallel', 'strict']),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    click.echo(f"✓ Configuration file created: {output}")
    click.echo("\nThe configuration file includes:")
    click.echo("  • Graph size limits")
    click.echo("  • 3-edge connectivity seed and cactus verification")
    click.echo("  • Bubble hairpin policy")
    click.echo("  • Worker count and output settings")


def _load_parser(config_file):
    """ConfigParser for a file, exiting with an input error code on bad YAML."""
    try:
        return ConfigParser(config_file)
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(EXIT_INPUT_ERROR)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    parser = _load_parser(config_file)
    errors = validate_config(parser.to_dict())
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Hairpin policy: {parser.get('bubbles.hairpin_policy')}")
    click.echo(f"  Threads: {parser.get('execution.threads')}")
    click.echo(f"  Output format: {parser.get('output.format')}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    parser = _load_parser(config_file)

    if format == 'yaml':
        click.echo(yaml.dump(parser.to_dict(), default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)

    graph_config = parser.get_graph_config()
    click.echo("\nGraph:")
    max_segments = graph_config.get('max_segments')
    click.echo(f"  Max segments: {max_segments if max_segments is not None else 'unlimited'}")

    connectivity_config = parser.get_connectivity_config()
    click.echo("\nConnectivity:")
    click.echo(f"  Label seed: {connectivity_config.get('label_seed')}")
    click.echo(f"  Verify cactus: {connectivity_config.get('verify_cactus')}")

    click.echo("\nBubbles:")
    click.echo(f"  Hairpin policy: {parser.get_bubbles_config().get('hairpin_policy')}")

    click.echo("\nExecution:")
    click.echo(f"  Threads: {parser.get_execution_config().get('threads')}")

    output_config = parser.get_output_config()
    click.echo("\nOutput:")
    click.echo(f"  Format: {output_config.get('format')}")
    reference_paths = output_config.get('reference_paths')
    click.echo(f"  Reference paths: {', '.join(reference_paths) if reference_paths else 'all'}")
    click.echo(f"  Log level: {output_config.get('logging', {}).get('level')}")


# ============================================================================
# Bubble Finding
# ============================================================================

@main.command()
@click.argument('gfa_file', type=click.Path())
@click.option('--format', '-f', 'output_format', type=click.Choice(VALID_OUTPUT_FORMATS),
              default=None, help='Report format (default: from config, else text)')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Output file (default: stdout)')
@click.option('--hairpin-policy', type=click.Choice(VALID_HAIRPIN_POLICIES), default=None,
              help='Report hairpin self-links as size-one bubbles or flag them')
@click.option('--threads', '-t', type=click.IntRange(min=1), default=None,
              help='Worker processes per stage')
@click.option('--reference-path', '-r', 'reference_paths', multiple=True,
              help='Path giving BED coordinates (repeatable; default: all paths)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file')
@click.pass_context
def bubbles(ctx, gfa_file, output_format, output, hairpin_policy, threads,
            reference_paths, config_file):
    """
    Find the ultrabubbles of a GFA graph.

    Prints one line per bubble (text), the full tree (json), or bubble
    intervals on reference paths (bed).
    """
    try:
        parser = ConfigParser(config_file)
        parser.merge_cli_overrides({
            'output.format': output_format,
            'bubbles.hairpin_policy': hairpin_policy,
            'execution.threads': threads,
            'output.reference_paths': list(reference_paths) or None,
        })
        parser.validate()
    except ConfigValidationError as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(EXIT_INPUT_ERROR)
    config = parser.to_dict()
    output_config = parser.get_output_config()
    _setup_logging(ctx, config)

    contents = _load_graph(ctx, gfa_file)

    token = CancellationToken()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    try:
        result = BubblePipeline(config, token=token).run(contents.graph)
    except GraphResourceError as e:
        click.echo(f"✗ Resource limit: {e}", err=True)
        ctx.exit(EXIT_RESOURCE_ERROR)
    except InternalConsistencyError as e:
        click.echo(f"✗ Internal error: {e}", err=True)
        ctx.exit(EXIT_INTERNAL_ERROR)
    except PipelineCancelled as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(EXIT_CANCELLED)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    target = Path(output) if output else sys.stdout
    report_format = output_config['format']
    try:
        if report_format == 'json':
            write_bubbles_json(result.tree, target, paths=contents.paths)
        elif report_format == 'bed':
            write_bubbles_bed(result.tree, contents.paths, target,
                              reference_paths=output_config['reference_paths'])
        else:
            write_bubbles_text(result.tree, target)
    except KeyError as e:
        click.echo(f"✗ {e.args[0]}", err=True)
        ctx.exit(EXIT_INPUT_ERROR)

    if not ctx.obj.get('QUIET'):
        click.echo(result.stats.summary(), err=True)
        if output:
            click.echo(f"✓ Bubbles written to {output}", err=True)


# ============================================================================
# Graph Inspection
# ============================================================================

@main.command('edge-count')
@click.argument('gfa_file', type=click.Path())
@click.pass_context
def edge_count(ctx, gfa_file):
    """Print inbound, outbound and total link counts per segment as CSV."""
    _setup_logging(ctx)
    contents = _load_graph(ctx, gfa_file)

    click.echo("nodeid,inbound,outbound,total")
    for name, inbound, outbound, total in contents.graph.edge_counts():
        click.echo(f"{name},{inbound},{outbound},{total}")


@main.command()
@click.argument('gfa_file', type=click.Path())
@click.option('--from', 'from_segment', required=True, help='First boundary segment')
@click.option('--to', 'to_segment', required=True, help='Second boundary segment')
@click.pass_context
def subpaths(ctx, gfa_file, from_segment, to_segment):
    """Print the walk of every path between two segments."""
    _setup_logging(ctx)
    contents = _load_graph(ctx, gfa_file)
    graph = contents.graph

    for name in (from_segment, to_segment):
        if name not in graph.segments:
            click.echo(f"✗ Unknown segment: {name}", err=True)
            ctx.exit(EXIT_INPUT_ERROR)

    click.echo(f"segments {len(graph.segments)}")
    click.echo(f"links    {len(graph.links)}")
    click.echo(f"paths    {len(contents.paths)}")

    for subpath in contents.paths.subpaths_between(from_segment, to_segment):
        steps = ','.join(f"{segment}{orient.value}" for segment, orient in subpath.steps)
        sequences = '\t'.join(
            oriented_sequence(graph.segments[segment].sequence, orient)
            for segment, orient in subpath.steps
        )
        click.echo(f"{subpath.path_name}\t{subpath.start_index}\t{steps}\t{sequences}")


@main.command()
@click.argument('gfa_file', type=click.Path())
@click.argument('subgraph_by', metavar='paths|segments',
                type=click.Choice(['paths', 'segments'], case_sensitive=False))
@click.option('--names', '-n', multiple=True, help='Name to select (repeatable)')
@click.option('--file', 'names_file', type=click.File('r'), default=None,
              help='File listing names, one per line (segments: tab-separated)')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Output GFA file (default: stdout)')
@click.pass_context
def subgraph(ctx, gfa_file, subgraph_by, names, names_file, output):
    """
    Print the part of a GFA named by paths or segments.

    Names come from --names, from --file, or from stdin. Selecting paths
    keeps the paths and every segment they visit; selecting segments keeps
    those segments and the paths lying entirely on them. Links are kept
    when both ends are kept.
    """
    _setup_logging(ctx)
    if names and names_file is not None:
        click.echo("✗ Use either --names or --file, not both", err=True)
        ctx.exit(EXIT_INPUT_ERROR)

    if not names:
        stream = names_file if names_file is not None else click.get_text_stream('stdin')
        names = _read_names(stream, split_tabs=subgraph_by.lower() == 'segments')

    contents = _load_graph(ctx, gfa_file)
    select = select_segments if subgraph_by.lower() == 'segments' else select_paths
    graph, paths = select(contents.graph, contents.paths, names)

    write_gfa(graph, Path(output) if output else sys.stdout, paths=paths)
    if output and not ctx.obj.get('QUIET'):
        click.echo(f"✓ Subgraph written to {output}", err=True)


def _read_names(stream, split_tabs):
    """Names listed one per line; segment lines may hold several, tab-separated."""
    names = []
    for line in stream:
        line = line.rstrip('\r\n')
        fields = line.split('\t') if split_tabs else [line]
        names.extend(name for name in fields if name)
    return names


@main.command()
def version():
    """Show version information."""
    click.echo(f"BubbleWeaver v{__version__}")
    click.echo("\nDependencies:")

    import numpy
    import scipy
    click.echo(f"  NumPy: {numpy.__version__}")
    click.echo(f"  SciPy: {scipy.__version__}")
    click.echo(f"  PyYAML: {yaml.__version__}")


if __name__ == '__main__':
    sys.exit(main())
