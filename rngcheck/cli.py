"""Command line interface for rngcheck."""

import json
import logging
import os

import click
import yaml

from .engine import Engine
from .sources import OsRandom, SeededRandom, fetch_sample


def _load_config(config_path):
    """Load a YAML or JSON configuration file into a dict."""
    if not config_path:
        return {}
    _, ext = os.path.splitext(config_path.lower())
    with open(config_path, "r", encoding="utf-8") as cf:
        if ext in (".yaml", ".yml"):
            return yaml.safe_load(cf) or {}
        return json.load(cf) or {}


def _setup_logging(log_level):
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
    )


def _echo_results(output):
    for r in output["results"]:
        name = r.get("test_name")
        if r.get("status") == "completed":
            verdict = "PASS" if r.get("passed") else "FAIL"
            click.echo(f"{name}: {verdict} (p_value={r.get('p_value')})")
        else:
            click.echo(f"{name}: {r.get('status').upper()} ({r.get('reason')})")


def _write_output(output, output_file):
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2)


def _with_block_size(tests, block_size):
    out = []
    for t in tests:
        if isinstance(t, str):
            t = {"name": t, "params": {}}
        if t.get("name") == "block_frequency":
            t = {"name": t["name"], "params": dict(t.get("params") or {}, block_size=block_size)}
        out.append(t)
    return out


@click.group()
@click.version_option(package_name="rngcheck")
def cli():
    """rngcheck - NIST SP 800-22 frequency tests for random number generators."""
    pass


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "-o", "output_file", type=click.Path(), default="report.json",
              help="Output JSON file path")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), default=None,
              help="Path to YAML or JSON configuration file specifying tests")
@click.option("--block-size", "block_size", type=click.IntRange(min=1), default=None,
              help="Block length for the block_frequency test (overrides config)")
@click.option("--log-level", "log_level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              default="WARNING", help="Set logging level for the rngcheck logger")
def analyze(input_file, output_file, config_path, block_size, log_level):
    """Run the frequency tests over the bits of INPUT_FILE."""
    _setup_logging(log_level)
    engine = Engine()
    try:
        with open(input_file, "rb") as f:
            input_bytes = f.read()

        config = _load_config(config_path)
        config.setdefault("log_level", log_level)
        if block_size is not None:
            config["tests"] = _with_block_size(config.get("tests") or engine.get_available_tests(), block_size)

        output = engine.analyze(input_bytes, config)
        _write_output(output, output_file)
        _echo_results(output)
        click.echo(f"Analysis complete. Results written to {output_file}")
    except Exception as e:
        click.echo(f"Error during analysis: {e}", err=True)
        raise click.Abort()
    finally:
        engine.close()


@cli.command()
@click.option("--bytes", "n_bytes", type=click.IntRange(min=4), default=100,
              help="Number of random bytes to fetch into a buffer")
@click.option("--bits", "n_bits", type=click.IntRange(min=0), default=None,
              help="Stream this many bits per test straight from the source instead of a buffer")
@click.option("--seed", "seed", type=int, default=None,
              help="Use a deterministic seeded generator instead of the OS source")
@click.option("--block-size", "block_size", type=click.IntRange(min=1), default=10,
              help="Block length for the block_frequency test")
@click.option("--out", "-o", "output_file", type=click.Path(), default=None,
              help="Optional output JSON file path")
@click.option("--log-level", "log_level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              default="WARNING", help="Set logging level for the rngcheck logger")
def osrng(n_bytes, n_bits, seed, block_size, output_file, log_level):
    """Check the operating system random source (or a seeded generator)."""
    _setup_logging(log_level)
    engine = Engine()
    try:
        rng = OsRandom() if seed is None else SeededRandom(seed)
        config = {
            "tests": ["monobit", {"name": "block_frequency", "params": {"block_size": block_size}}],
            "log_level": log_level,
        }
        if n_bits is not None:
            output = engine.analyze_rng(rng, n_bits, config)
        else:
            output = engine.analyze(fetch_sample(rng, n_bytes), config)

        _echo_results(output)
        if output_file:
            _write_output(output, output_file)
    except Exception as e:
        click.echo(f"osrng failed: {e}", err=True)
        raise click.Abort()
    finally:
        engine.close()


if __name__ == "__main__":
    cli()
