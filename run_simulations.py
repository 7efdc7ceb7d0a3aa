#!/usr/bin/env python
"""Run time-propagation scenarios from YAML specification files.

Usage:
    python run_simulations.py <experiment_name>

Example:
    python run_simulations.py reference

This will:
1. Look for simulations/<experiment_name>/sim_specs/*.yaml
2. Propagate each scenario defined in the YAML files and print the
   computed and expected final states
3. Save traces and metadata to simulations/<experiment_name>/results/
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

import pint
import yaml

from timeprop.scenarios import ScenarioResult, scenario_from_spec


def load_sim_spec(yaml_path: Path) -> dict:
    """Load and validate a scenario specification from YAML."""
    with open(yaml_path, "r") as f:
        spec = yaml.safe_load(f)

    for section in ["simulation", "force"]:
        if section not in spec:
            raise ValueError(f"Missing required section: {section}")

    return spec


def select_spec_files(spec_dir: Path, patterns=None) -> list:
    """
    Select YAML spec files by name or glob pattern.

    Parameters
    ----------
    spec_dir : Path
        Directory containing the *.yaml spec files.
    patterns : list of str, optional
        Spec names (without .yaml) or glob patterns. All files if None.

    Returns
    -------
    list of Path
        Sorted, de-duplicated spec files.

    Raises
    ------
    FileNotFoundError
        If an exact (non-glob) name has no matching file.
    """
    if not patterns:
        return sorted(spec_dir.glob("*.yaml"))

    yaml_files = []
    for pattern in patterns:
        if "*" in pattern or "?" in pattern or "[" in pattern:
            matched = list(spec_dir.glob(f"{pattern}.yaml"))
            if not matched:
                print(f"Warning: No files match pattern '{pattern}'")
            yaml_files.extend(matched)
        else:
            yaml_path = spec_dir / f"{pattern}.yaml"
            if not yaml_path.exists():
                raise FileNotFoundError(f"Spec file not found: {yaml_path}")
            yaml_files.append(yaml_path)

    return sorted(set(yaml_files))


def run_single_simulation(sim_name: str, spec: dict, ureg=None) -> ScenarioResult:
    """Build the scenario from its spec, run it and print the report."""
    scenario = scenario_from_spec(sim_name, spec, ureg=ureg)

    print(f"Running {scenario.params.n_steps} steps...")
    result = scenario.run()

    for line in result.report():
        print(line)

    return result


def save_results(result: ScenarioResult, output_dir: Path, sim_name: str):
    """Save the trace as CSV and the run summary as YAML."""
    output_dir.mkdir(parents=True, exist_ok=True)

    result.trace.save(str(output_dir / f"{sim_name}_trace.csv"))

    scenario = result.scenario
    params = scenario.params
    metadata = {
        "simulation_name": sim_name,
        "title": scenario.title,
        "timestamp": datetime.now().isoformat(),
        "force": scenario.force_desc,
        "tmax": float(params.tmax),
        "x0": float(params.x0),
        "a0": float(params.a0),
        "h": float(params.h),
        "n_steps": result.trace.n_steps,
        "x_final": float(result.x_final),
        "a_final": float(result.a_final),
        "passed": bool(result.passed),
        "legend_loc": scenario.legend_loc,
    }
    if result.expected is not None:
        metadata["x_expected"] = float(result.expected[0])
        metadata["a_expected"] = float(result.expected[1])

    with open(output_dir / f"{sim_name}_metadata.yaml", "w") as f:
        yaml.dump(metadata, f, default_flow_style=False)

    print(f"Results saved to {output_dir}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run time-propagation scenarios from YAML specs",
        epilog="""
Examples:
  python run_simulations.py reference                       # Run all scenarios
  python run_simulations.py reference --sim spring_motion   # Run one scenario
  python run_simulations.py reference --sim "uniform_*"     # Run matching pattern
  python run_simulations.py reference --list                # List scenarios
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "experiment_name",
        help="Name of experiment (directory in simulations/)",
    )
    parser.add_argument(
        "--sim",
        "--spec",
        nargs="*",
        dest="simulations",
        metavar="NAME",
        help="Run specific scenario(s) by name (without .yaml). "
        "Supports glob patterns (e.g., 'uniform_*'). "
        "If not specified, runs all scenarios.",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="List available scenarios and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse specs but don't run scenarios",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=Path(__file__).parent / "simulations",
        help="Directory containing experiments (default: ./simulations)",
    )

    args = parser.parse_args(argv)

    base_dir = args.base_dir / args.experiment_name
    spec_dir = base_dir / "sim_specs"
    results_dir = base_dir / "results"

    if not spec_dir.exists():
        print(f"Error: Spec directory not found: {spec_dir}")
        sys.exit(1)

    all_yaml_files = sorted(spec_dir.glob("*.yaml"))
    if not all_yaml_files:
        print(f"Error: No YAML files found in {spec_dir}")
        sys.exit(1)

    if args.list:
        print(f"Available scenarios in '{args.experiment_name}':")
        for yaml_file in all_yaml_files:
            print(f"  {yaml_file.stem}")
        sys.exit(0)

    try:
        yaml_files = select_spec_files(spec_dir, args.simulations)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not yaml_files:
        print(f"Error: No YAML files found in {spec_dir}")
        sys.exit(1)

    print(f"Found {len(yaml_files)} scenario spec(s)")
    print(f"Results will be saved to: {results_dir}")
    print()

    # Shared so that units from different specs are compatible
    ureg = pint.UnitRegistry()

    failed = []
    for yaml_file in yaml_files:
        sim_name = yaml_file.stem
        print(f"{'=' * 60}")
        print(f"Processing: {sim_name}")
        print(f"{'=' * 60}")

        spec = load_sim_spec(yaml_file)

        if args.dry_run:
            print("Spec loaded successfully (dry run)")
            print(f"  Title: {spec.get('title', sim_name)}")
            print(f"  Force: {list(spec['force'].keys())[0]}")
            continue

        try:
            result = run_single_simulation(sim_name, spec, ureg=ureg)
            save_results(result, results_dir, sim_name)
        except Exception as e:
            print(f"Error running scenario {sim_name}: {e}")
            raise

        if not result.passed:
            failed.append(sim_name)
        print()

    if failed:
        print(f"Scenarios not matching expectations: {', '.join(failed)}")
        sys.exit(1)

    print("All scenarios completed!")


if __name__ == "__main__":
    main()
