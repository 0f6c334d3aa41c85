#!/usr/bin/env python3
"""
Rule-Based Procedural Map Generation

Generates cave/dungeon-like tile maps by alternating a cellular automata
smoothing pass with a randomized drunk agent carving pass.

Usage:
    python -m rule_based_pcg.main [--config configs/default.yaml] [options]

Examples:
    python -m rule_based_pcg.main
    python -m rule_based_pcg.main --config configs/default.yaml --seed 42
    python -m rule_based_pcg.main --width 60 --height 30 --iterations 10 --gif
    python -m rule_based_pcg.main --no-ascii --csv --snapshot --out-dir results/
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import SimulationConfig, load_config
from .model.engine import GenerationEngine
from .export.console import ConsoleRenderer
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Rule-Based Procedural Map Generation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m rule_based_pcg.main
    python -m rule_based_pcg.main --config configs/default.yaml --seed 42
    python -m rule_based_pcg.main --width 60 --height 30 --iterations 10 --gif
    python -m rule_based_pcg.main --no-ascii --csv --snapshot --out-dir results/
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file (default: built-in defaults)')

    # Optional overrides
    parser.add_argument('--iterations', type=int, default=None,
                        help='Override number of iterations')
    parser.add_argument('--width', type=int, default=None,
                        help='Override grid width')
    parser.add_argument('--height', type=int, default=None,
                        help='Override grid height')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--ascii', dest='ascii', action='store_true', default=None,
                        help='Print every map to stdout (default)')
    parser.add_argument('--no-ascii', dest='ascii', action='store_false',
                        help='Do not print maps')

    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable per-iteration CSV log')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV log (default)')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Save a PNG of the final map')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot (default)')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Enable debug logging')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Load the configuration and apply CLI overrides."""
    config = load_config(args.config) if args.config else SimulationConfig()

    if args.iterations is not None:
        config.iterations = args.iterations
    if args.width is not None:
        config.grid.width = args.width
    if args.height is not None:
        config.grid.height = args.height
    if args.ascii is not None:
        config.ascii_enabled = args.ascii
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    config.validate()
    return config


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Load configuration
    try:
        config = build_config(args)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except (ValueError, KeyError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if not config.quiet:
        print("--- CELLULAR AUTOMATA AND DRUNK AGENT GENERATION ---")
        print(f"  Grid: {config.grid.width}x{config.grid.height}")
        print(f"  Iterations: {config.iterations}")
        print(f"  CA radius/threshold: {config.cellular.radius}/{config.cellular.threshold}")

    engine = GenerationEngine(config)

    # Initialize exporters
    console = None
    if config.ascii_enabled and not config.quiet:
        console = ConsoleRenderer()

    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'generation_log.csv')
        csv_writer.open()

    visualizer = Visualizer(config.grid.width, config.grid.height)
    reporter = Reporter(str(args.config) if args.config else None, config.seed)

    initial = engine.initial_state()
    if console:
        console.render(initial)
    if config.gif_enabled:
        visualizer.buffer_frame(initial)

    produced = []

    def on_map_ready(state):
        produced.append(state)
        if console:
            console.render(state)
        if csv_writer:
            csv_writer.append(state)
        if config.gif_enabled:
            visualizer.buffer_frame(state)
        reporter.update(state)

    # Main generation loop
    try:
        engine.run(on_map_ready)
    except KeyboardInterrupt:
        if not config.quiet:
            print("\nGeneration interrupted by user.")
    finally:
        if csv_writer:
            csv_writer.close()

    final_state = produced[-1] if produced else initial

    if csv_writer and not config.quiet:
        print(f"\nCSV saved: {config.out_dir / 'generation_log.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_map.png'
        visualizer.save_snapshot(final_state, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'generation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    # Print summary report
    if not config.quiet:
        report = reporter.generate_summary(
            final_state,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
