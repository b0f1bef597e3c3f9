"""
L-system generator - command-line entry point.

Builds a system from a preset or a JSON config, produces the requested
generation and prints it as "<n> = <symbols>".
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from lsystem.analysis import alphabet_of, growth_rate
from lsystem.config import LSystemConfig, PRESETS
from lsystem.core import Axiom, EvolutionResult, EvolutionRunner, LSystem, Rules
from lsystem.storage import save_result
from lsystem.visualization import plot_lengths, save_figure


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_system(config: LSystemConfig) -> LSystem[str]:
    """
    Create the engine described by a config.

    Raises:
        EmptyAxiomError: If the config has an empty axiom
    """
    axiom = Axiom.from_symbols(config.axiom)
    rules = Rules.from_dict(config.rules)
    return LSystem(
        axiom,
        rules,
        executor=config.engine.executor,
        max_workers=config.engine.max_workers,
        parallel_threshold=config.engine.parallel_threshold,
    )


def run(config: LSystemConfig) -> EvolutionResult:
    """
    Run a configured system up to `config.run.generations`.

    Returns:
        EvolutionResult (final generation is the one to print)
    """
    logger.info(f"Starting system: {config.name}")

    system = build_system(config)
    alphabet = alphabet_of(system.axiom, system.rules)
    logger.info(f"Axiom length: {len(system.axiom)}, rules: {len(system.rules)}, "
                f"alphabet: {len(alphabet)} symbols")
    logger.info(f"Growth rate: {growth_rate(system.rules, alphabet):.4f}")

    runner = EvolutionRunner(system)
    result = runner.run(
        max_generations=config.run.generations,
        store_history=config.run.store_history,
        history_stride=config.run.history_stride,
        detect_cycles=config.run.detect_cycles,
    )

    logger.info(f"Generation {result.final.index}: length {len(result.final)} "
                f"({result.stop_reason}, {result.stats.elapsed_time:.3f}s)")
    return result


def load_config(args: argparse.Namespace) -> LSystemConfig:
    """Resolve the config from --config or --preset, then apply overrides."""
    if args.config:
        config = LSystemConfig.load(args.config)
    else:
        config = PRESETS[args.preset]()

    if args.generation is not None:
        config.run.generations = args.generation
    if args.executor is not None:
        config.engine.executor = args.executor
    if args.workers is not None:
        config.engine.max_workers = args.workers
    if args.until_stable:
        config.run.detect_cycles = True
    if args.output or args.plot:
        config.run.store_history = True
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parallel L-system generator")

    parser.add_argument('--preset', choices=sorted(PRESETS), default='sierpinski',
                        help='Built-in system (default: sierpinski)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON config file (overrides --preset)')
    parser.add_argument('--generation', type=int, default=None,
                        help='Generation to print (default: from config)')
    parser.add_argument('--executor', choices=['serial', 'thread', 'process'], default=None,
                        help='Rewriting executor (default: from config)')
    parser.add_argument('--workers', type=int, default=None,
                        help='Number of workers (default: CPU count)')
    parser.add_argument('--until-stable', action='store_true',
                        help='Stop early when a generation repeats')
    parser.add_argument('--save-config', type=str, default=None,
                        help='Write the resolved config to this JSON file and exit')
    parser.add_argument('--output', type=str, default=None,
                        help='Directory to save the generation history')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a generation length plot to this file')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for running systems."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args)
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Could not load config: {e}")
        return 2

    for issue in config.validate():
        logger.warning(f"Config: {issue}")

    if args.save_config:
        try:
            config.save(args.save_config)
        except OSError as e:
            logger.error(f"Could not save config: {e}")
            return 1
        logger.info(f"Config saved to: {args.save_config}")
        return 0

    try:
        result = run(config)
    except ValueError as e:
        logger.error(str(e))
        return 2

    print(f"{result.final.index} = {result.final.render()}")

    if args.output:
        suffix = ".json.gz" if config.storage.compress else ".json"
        path = Path(args.output) / f"{config.name}{suffix}"
        try:
            save_result(result, path, compress=config.storage.compress)
        except OSError as e:
            logger.error(f"Could not save result: {e}")
            return 1

    if args.plot:
        ax = plot_lengths(result.index_series(), result.length_series(), title=config.name)
        try:
            save_figure(ax, args.plot)
        except OSError as e:
            logger.error(f"Could not save plot: {e}")
            return 1
        logger.info(f"Plot saved to: {args.plot}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
