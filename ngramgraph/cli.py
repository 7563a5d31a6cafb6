"""
Command-line interface for the n-gram graph engine.

Provides commands for comparing and ranking texts, rendering and
encoding their graphs and managing configuration.
"""

import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import click

from ngramgraph.core.config import POLICY_NAMES, Config, EngineConfig
from ngramgraph.core.exceptions import NGramGraphError
from ngramgraph.engine import METRICS, NGramGraphEngine
from ngramgraph.graph.export import edge_summary, graph_to_dot
from ngramgraph.graph.metrics import GraphMetrics
from ngramgraph.ingestion.line_loader import LineLoader
from ngramgraph.utils.logging_config import setup_logging
from ngramgraph.utils.validation import resolve_text, validate_file, validate_text

logger = logging.getLogger(__name__)


def graph_options(func):
    """Attach the graph construction options shared by every command."""
    options = [
        click.option("--min-size", type=int, default=None, help="Smallest n-gram size"),
        click.option("--max-size", type=int, default=None, help="Largest n-gram size"),
        click.option("--window", "-w", type=int, default=None, help="Neighbourhood window size"),
        click.option("--policy", type=click.Choice(POLICY_NAMES), default=None, help="Window weighting policy"),
        click.option("--sigma", type=float, default=None, help="Gaussian spread (defaults to the window)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_engine(ctx, min_size=None, max_size=None, window=None, policy=None, sigma=None) -> NGramGraphEngine:
    """Create an engine from the loaded configuration and command-line overrides."""
    config: EngineConfig = ctx.obj["config"]
    overrides = {
        "min_size": min_size,
        "max_size": max_size,
        "window": window,
        "policy": policy,
        "sigma": sigma,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config.graph, key, value)
    if config.graph.min_size > config.graph.max_size and max_size is None:
        config.graph.max_size = config.graph.min_size
    return NGramGraphEngine(config)


def handle_errors(func):
    """Report library errors on stderr and exit non-zero."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except NGramGraphError as e:
            click.echo(f"Error: {e}", err=True)
            if ctx.obj.get("verbose"):
                import traceback
                traceback.print_exc()
            sys.exit(1)
    return wrapper


def read_argument(value: str, from_file: bool) -> str:
    text, error = resolve_text(value, from_file)
    if error:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    return text


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--log-file", type=click.Path(), help="Log file path")
@click.option("--config", "config_path", type=click.Path(), help="JSON configuration file")
@click.pass_context
def cli(ctx, verbose: bool, log_file: Optional[str], config_path: Optional[str]):
    """
    N-Gram Graph Engine

    Represent texts as graphs of neighbouring character n-grams and
    compare them by graph similarity.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_logging(level="DEBUG" if verbose else "INFO", log_file=Path(log_file) if log_file else None)

    Config.reset()
    try:
        if config_path:
            config = Config.load_from_file(Path(config_path))
        else:
            config = Config.load_from_env()
    except (NGramGraphError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    ctx.obj["config"] = config


@cli.command()
@click.argument("text_a")
@click.argument("text_b")
@click.option("--files", "-f", is_flag=True, help="Treat arguments as file paths")
@graph_options
@click.pass_context
@handle_errors
def compare(ctx, text_a: str, text_b: str, files: bool, **params):
    """Compare two texts (or files with --files)."""
    engine = build_engine(ctx, **params)
    a = read_argument(text_a, files)
    b = read_argument(text_b, files)

    for text in (a, b):
        is_valid, warning = validate_text(text, engine.config.graph.min_size)
        if not is_valid:
            logger.warning(warning)

    similarity = engine.compare(a, b)

    click.echo("\n" + "=" * 60)
    click.echo("GRAPH SIMILARITY")
    click.echo("=" * 60)
    click.echo(f"Value Similarity:       {similarity.value_similarity:.4f}")
    click.echo(f"Containment Similarity: {similarity.containment_similarity:.4f}")
    click.echo(f"Size Similarity:        {similarity.size_similarity:.4f}")
    click.echo("-" * 60)
    click.echo(f"Overall Similarity:     {similarity.overall_similarity:.4f}")
    click.echo("=" * 60)


@cli.command()
@click.argument("lines_file", type=click.Path())
@click.argument("query")
@click.option("--metric", "-m", type=click.Choice(METRICS), default="overall", help="Score to rank by")
@click.option("--top-k", "-k", type=int, default=None, help="Number of results to show (0 shows all)")
@click.option("--threshold", type=float, default=None, help="Minimum score to show")
@graph_options
@click.pass_context
@handle_errors
def rank(ctx, lines_file: str, query: str, metric: str, top_k: Optional[int], threshold: Optional[float], **params):
    """Rank every line of LINES_FILE by similarity to QUERY."""
    is_valid, error = validate_file(lines_file)
    if not is_valid:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    engine = build_engine(ctx, **params)
    if top_k is not None:
        engine.config.similarity.top_k = top_k
    if threshold is not None:
        engine.config.similarity.similarity_threshold = threshold

    lines = LineLoader(lines_file, skip_blank=True).lines()
    results = engine.rank(lines, query, metric=metric)

    click.echo(f"\nTop {len(results)} of {len(lines)} lines by {metric} similarity:")
    click.echo("-" * 60)
    for i, result in enumerate(results, 1):
        click.echo(f"{i:3}. [{result.score:.4f}] {result.text}")


@cli.command()
@click.argument("text")
@click.option("--files", "-f", is_flag=True, help="Treat the argument as a file path")
@click.option("--size", "-s", type=int, default=None, help="N-gram size of the level to render")
@click.option("--undirected", is_flag=True, help="Render an undirected graph")
@click.option("--output", "-o", type=click.Path(), help="Write DOT to this file")
@graph_options
@click.pass_context
@handle_errors
def dot(ctx, text: str, files: bool, size: Optional[int], undirected: bool, output: Optional[str], **params):
    """Render the n-gram graph of TEXT in Graphviz DOT syntax."""
    engine = build_engine(ctx, **params)
    graph = engine.build(read_argument(text, files))
    level = graph.level_by_size(graph.max_size if size is None else size)
    if level is None:
        click.echo(f"Error: no level of size {size} (sizes {graph.min_size}-{graph.max_size})", err=True)
        sys.exit(1)

    document = graph_to_dot(level, directed=not undirected)
    if output:
        Path(output).write_text(document + "\n", encoding="utf-8")
        click.echo(f"DOT written to {output}")
    else:
        click.echo(document)


@cli.command()
@click.argument("text")
@click.option("--files", "-f", is_flag=True, help="Treat the argument as a file path")
@click.option("--method", type=click.Choice(["canonical", "dfs"]), default="canonical", help="Encoding to produce")
@click.option("--size", "-s", type=int, default=None, help="N-gram size of the level to encode")
@click.option("--start", type=str, default=None, help="Start vertex for the dfs encoding")
@graph_options
@click.pass_context
@handle_errors
def encode(ctx, text: str, files: bool, method: str, size: Optional[int], start: Optional[str], **params):
    """Print a string encoding of the n-gram graph of TEXT."""
    engine = build_engine(ctx, **params)
    content = read_argument(text, files)
    if method == "dfs":
        click.echo(engine.dfs_code(content, size=size, start=start))
    else:
        click.echo(engine.canonical_code(content, size=size))


@cli.command()
@click.argument("text")
@click.option("--files", "-f", is_flag=True, help="Treat the argument as a file path")
@click.option("--edges", "show_edges", is_flag=True, help="List every edge")
@graph_options
@click.pass_context
@handle_errors
def stats(ctx, text: str, files: bool, show_edges: bool, **params):
    """Show per-level statistics for the n-gram graph of TEXT."""
    engine = build_engine(ctx, **params)
    graph = engine.build(read_argument(text, files))

    click.echo("\n" + "=" * 60)
    click.echo("N-GRAM GRAPH STATISTICS")
    click.echo("=" * 60)
    click.echo(f"Policy: {graph.policy.name}, window: {graph.window}")
    click.echo(f"Total edges: {graph.length()}")

    for n, level in graph.iter_levels():
        level_stats = GraphMetrics(level).get_statistics()
        click.echo(f"\nLevel {n}:")
        click.echo(f"  Vertices: {level_stats['vertex_count']}")
        click.echo(f"  Edges: {level_stats['edge_count']}")
        click.echo(f"  Total weight: {level_stats['total_edge_weight']:.2f}")
        click.echo(f"  Density: {level_stats['density']:.4f}")
        click.echo(f"  Components: {level_stats['weakly_connected_components']}")
        if show_edges:
            for edge in level.edges():
                click.echo(f"    {edge_summary(edge)}")


@cli.command()
@click.argument("text_a")
@click.argument("text_b")
@click.option("--files", "-f", is_flag=True, help="Treat arguments as file paths")
@graph_options
@click.pass_context
@handle_errors
def project(ctx, text_a: str, text_b: str, files: bool, **params):
    """L1 distance between sparse random projections of two texts."""
    engine = build_engine(ctx, **params)
    distance = engine.projection_distance(read_argument(text_a, files), read_argument(text_b, files))
    projection = engine.config.projection
    click.echo(
        f"Projection distance ({projection.projection}, dim={projection.target_dim}, "
        f"rank={projection.rank}): {distance:.4f}"
    )


@cli.command()
@click.argument("name")
@click.argument("text")
@click.option("--files", "-f", is_flag=True, help="Treat the argument as a file path")
@graph_options
@click.pass_context
@handle_errors
def save(ctx, name: str, text: str, files: bool, **params):
    """Build the graph of TEXT and store it under NAME."""
    engine = build_engine(ctx, **params)
    engine.save(name, engine.build(read_argument(text, files)))
    click.echo(f"Graph stored as {name!r} in {engine.config.storage.storage_dir}")


@cli.command("list-graphs")
@click.pass_context
@handle_errors
def list_graphs(ctx):
    """List stored graphs."""
    engine = NGramGraphEngine(ctx.obj["config"])
    names = engine.store.list_graphs()
    if not names:
        click.echo("No stored graphs")
        return
    click.echo("\nStored graphs:")
    click.echo("-" * 40)
    for name in names:
        click.echo(f"  {name}")


@cli.command()
@click.option("--output", "-o", type=click.Path(), default="config.json", help="Output path")
@click.pass_context
def init(ctx, output: str):
    """Initialize a configuration file with defaults."""
    Config.reset()
    Config.save_to_file(output)
    click.echo(f"Configuration saved to {output}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
