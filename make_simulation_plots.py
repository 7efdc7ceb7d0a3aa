#!/usr/bin/env python
"""Generate plots from saved propagation traces.

Usage:
    python make_simulation_plots.py <experiment_name>

Example:
    python make_simulation_plots.py reference

This will:
1. Look for simulations/<experiment_name>/results/*_metadata.yaml
2. Plot x(t) and a(t) from the matching *_trace.csv
3. Save plots to simulations/<experiment_name>/plots/<name>.png
"""

import argparse
import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving files
import matplotlib.pyplot as plt
import yaml

from timeprop.trace import Trace


def find_simulations(results_dir: Path) -> list:
    """
    Find all simulation names in a results directory.

    Returns list of simulation names (without file extensions).
    """
    meta_files = list(results_dir.glob("*_metadata.yaml"))
    sim_names = [f.stem.replace("_metadata", "") for f in meta_files]
    return sorted(sim_names)


def load_simulation_results(results_dir: Path, sim_name: str) -> dict:
    """
    Load a saved trace and its metadata.

    Returns
    -------
    dict
        {'trace': Trace, 'metadata': dict}
    """
    trace = Trace.load(str(results_dir / f"{sim_name}_trace.csv"))
    with open(results_dir / f"{sim_name}_metadata.yaml", "r") as f:
        metadata = yaml.safe_load(f)
    return {"trace": trace, "metadata": metadata}


def make_trace_plot(data: dict, figsize: tuple = (7, 4)) -> plt.Figure:
    """Create the x(t) / a(t) plot for one simulation."""
    metadata = data["metadata"]
    fig, ax = plt.subplots(figsize=figsize)
    data["trace"].plot(
        ax=ax,
        title=metadata.get("title", metadata.get("simulation_name")),
        legend_loc=metadata.get("legend_loc", "best"),
    )
    return fig


def make_all_plots(
    results_dir: Path, plots_dir: Path, sim_name: str, dpi: int = 150
) -> Path:
    """Generate the plot for a simulation and save it as PNG."""
    print("  Loading data...")
    data = load_simulation_results(results_dir, sim_name)

    plots_dir.mkdir(parents=True, exist_ok=True)

    print("  Creating trace plot...")
    fig = make_trace_plot(data)
    filename = plots_dir / f"{sim_name}.png"
    fig.savefig(filename, dpi=dpi, bbox_inches="tight")
    plt.close(fig)

    return filename


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate plots from saved propagation traces"
    )
    parser.add_argument(
        "experiment_name",
        help="Name of experiment (directory in simulations/)",
    )
    parser.add_argument(
        "--sim",
        nargs="*",
        dest="simulations",
        metavar="NAME",
        help="Plot specific simulation(s) by name. Plots all if omitted.",
    )
    parser.add_argument(
        "--dpi", type=int, default=150, help="Resolution of saved images"
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=Path(__file__).parent / "simulations",
        help="Directory containing experiments (default: ./simulations)",
    )

    args = parser.parse_args(argv)

    base_dir = args.base_dir / args.experiment_name
    results_dir = base_dir / "results"
    plots_dir = base_dir / "plots"

    if not results_dir.exists():
        print(f"Error: Results directory not found: {results_dir}")
        print("Run run_simulations.py first.")
        sys.exit(1)

    sim_names = args.simulations or find_simulations(results_dir)
    if not sim_names:
        print(f"Error: No simulation results found in {results_dir}")
        sys.exit(1)

    print(f"Found {len(sim_names)} simulation(s)")
    for sim_name in sim_names:
        print(f"Plotting: {sim_name}")
        filename = make_all_plots(results_dir, plots_dir, sim_name, dpi=args.dpi)
        print(f"  Saved {filename}")

    print("All plots completed!")


if __name__ == "__main__":
    main()
