"""Command-line interface for EphysForge.

This module provides CLI commands for running headless recording
simulations, validating configurations and listing available components.

Example:
    $ ephysforge run config.yml --frames 2000 --filter-mode spike
    $ ephysforge validate config.yml
    $ ephysforge list-components
"""

import argparse
import logging
import sys
from typing import Any, Dict, List

from tqdm import tqdm

from ephysforge.config.schema import EphysForgeConfig
from ephysforge.config.yaml_utils import load_config
from ephysforge.core.simulation_engine import SimulationEngine
from ephysforge.filters.bandpass import FILTER_MODE_CUTOFFS, FilterMode
from ephysforge.register_components import register_all
from ephysforge.registry import FILTER_REGISTRY, NEURON_REGISTRY, SOLVER_REGISTRY

logger = logging.getLogger("ephysforge.cli")


def validate_config(config: EphysForgeConfig) -> List[str]:
    """Check a configuration for values the engine cannot run with.

    Args:
        config: Parsed configuration.

    Returns:
        List of human-readable errors (empty when valid).
    """
    errors = []

    register_all()
    if not SOLVER_REGISTRY.is_registered(config.physics.solver.lower()):
        errors.append(
            f"Unknown field solver '{config.physics.solver}'. "
            f"Valid: {SOLVER_REGISTRY.list_registered()}"
        )
    if config.physics.conductivity <= 0:
        errors.append("physics.conductivity must be positive")
    if config.physics.d10 <= 0:
        errors.append("physics.d10 must be positive")
    if config.physics.noise_level < 0:
        errors.append("physics.noise_level must be non-negative")

    valid_modes = [m.value for m in FilterMode]
    if config.filter.mode not in valid_modes:
        errors.append(f"Invalid filter mode '{config.filter.mode}'. Valid: {valid_modes}")

    sim = config.simulation
    if sim.dt <= 0:
        errors.append("simulation.dt must be positive")
    if sim.steps_per_frame < 1:
        errors.append("simulation.steps_per_frame must be at least 1")

    pop = config.population
    if pop.spacing <= 0:
        errors.append("population.spacing must be positive")
    if pop.ml_end < pop.ml_start:
        errors.append("population.ml_end must not be smaller than ml_start")
    if not 0.0 <= pop.interneuron_fraction <= 1.0:
        errors.append("population.interneuron_fraction must be within [0, 1]")
    if max(pop.pyramidal_rate, pop.interneuron_rate) * sim.dt >= 1.0:
        errors.append("base firing rate * dt must stay well below 1")

    if config.electrodes.history_length < 1:
        errors.append("electrodes.history_length must be at least 1")
    for key in ("center", "reference"):
        if len(getattr(config.electrodes, key)) != 3:
            errors.append(f"electrodes.{key} must have 2 or 3 coordinates")

    det = config.detector
    if det.threshold <= 0:
        errors.append("detector.threshold must be positive")
    if det.refractory_period < 0:
        errors.append("detector.refractory_period must be non-negative")
    if det.max_records < 1:
        errors.append("detector.max_records must be at least 1")

    return errors


def _load(path: str) -> EphysForgeConfig:
    config = load_config(path)
    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"Validation error: {error}", file=sys.stderr)
        raise ValueError(f"Configuration validation failed: {path}")
    return config


def summarize(engine: SimulationEngine, num_frames: int) -> Dict[str, Any]:
    """Collect a printable summary of a finished run."""
    amplitudes = engine.spike_records.as_array()
    return {
        "frames": num_frames,
        "duration_s": engine.time,
        "neurons": len(engine.population),
        "filter_mode": engine.filter_mode.value,
        "spikes": len(engine.spike_records),
        "mean_amplitudes": (
            amplitudes.mean(axis=0).tolist() if amplitudes.size else []
        ),
        "last_values": [e.voltage for e in engine.electrodes],
    }


def cmd_run(args: argparse.Namespace) -> int:
    """Run a headless simulation from a YAML config.

    Args:
        args: Command-line arguments with config, frames, filter_mode,
            noise and seed.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        config = _load(args.config) if args.config else EphysForgeConfig()

        # Overrides
        if args.filter_mode:
            config.filter.mode = args.filter_mode
        if args.noise is not None:
            config.physics.noise_level = args.noise
        if args.seed is not None:
            config.simulation.seed = args.seed
        config.simulation.running = True

        print(f"Building simulation ({args.frames} frames)...")
        engine = SimulationEngine(config)
        for _ in tqdm(range(args.frames), desc="frames", disable=args.quiet):
            engine.step_frame()

        summary = summarize(engine, args.frames)
        print("\nSimulation completed successfully!")
        print(f"Simulated time: {summary['duration_s']:.3f} s")
        print(f"Neurons: {summary['neurons']}")
        print(f"Filter mode: {summary['filter_mode']}")
        print(f"Detected spikes: {summary['spikes']}")
        if summary["mean_amplitudes"]:
            formatted = ", ".join(f"{a:.3f}" for a in summary["mean_amplitudes"])
            print(f"Mean spike amplitudes (mV): [{formatted}]")
        return 0

    except Exception as e:
        logger.exception("Simulation failed")
        print(f"Error running simulation: {e}", file=sys.stderr)
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate YAML configuration without running.

    Returns:
        Exit code (0 for valid, 1 for invalid).
    """
    try:
        config = _load(args.config)
    except FileNotFoundError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"✓ Configuration is valid!")
    print(f"  Field solver: {config.physics.solver}")
    print(f"  Noise level: {config.physics.noise_level} uV")
    print(f"  Filter mode: {config.filter.mode}")
    print(f"  dt: {config.simulation.dt * 1000:.2f} ms x {config.simulation.steps_per_frame} steps/frame")
    return 0


def cmd_list_components(args: argparse.Namespace) -> int:
    """List registered components and filter modes.

    Returns:
        Exit code (0 for success).
    """
    register_all()
    print("Available EphysForge Components:")
    print("=" * 50)

    print("\n🧠 Current sources:")
    for name in NEURON_REGISTRY.list_registered():
        print(f"  - {name}")

    print("\n📊 Filters:")
    for name in FILTER_REGISTRY.list_registered():
        print(f"  - {name}")

    print("\n⚙️  Field solvers:")
    for name in SOLVER_REGISTRY.list_registered():
        print(f"  - {name}")

    print("\n🎚  Filter modes:")
    for mode in FilterMode:
        if mode in FILTER_MODE_CUTOFFS:
            low, high = FILTER_MODE_CUTOFFS[mode]
            print(f"  - {mode.value} ({low:g} Hz - {high:g} Hz)")
        else:
            print(f"  - {mode.value} (unfiltered)")

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog='ephysforge',
        description='EphysForge: extracellular recording simulator'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity (default: WARNING)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser(
        'run',
        help='Run a headless simulation'
    )
    run_parser.add_argument(
        'config',
        nargs='?',
        help='Path to YAML configuration file (defaults when omitted)'
    )
    run_parser.add_argument(
        '--frames',
        type=int,
        default=400,
        help='Number of rendered frames to simulate (default: 400)'
    )
    run_parser.add_argument(
        '--filter-mode',
        choices=[m.value for m in FilterMode],
        help='Override the channel filter mode'
    )
    run_parser.add_argument(
        '--noise',
        type=float,
        help='Override the measurement noise level in uV'
    )
    run_parser.add_argument(
        '--seed',
        type=int,
        help='Seed for the random source'
    )
    run_parser.add_argument(
        '--quiet',
        action='store_true',
        help='Hide the progress bar'
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        'validate',
        help='Validate YAML config without running'
    )
    validate_parser.add_argument(
        'config',
        help='Path to YAML configuration file'
    )

    # List components command
    subparsers.add_parser(
        'list-components',
        help='List current sources, filters, solvers and filter modes'
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        'run': cmd_run,
        'validate': cmd_validate,
        'list-components': cmd_list_components,
    }
    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
