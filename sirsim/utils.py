import os
from typing import Optional

import matplotlib.pyplot as plt

from .simulation import Report, SimulationResult


def format_report(report: Report, csv: bool = False) -> str:
    return report.format_csv() if csv else report.format()


def _plot_sir_curves(ax, result: SimulationResult, title: str = None) -> None:
    """
    Helper function to plot SIR curves on a given axes.
    """
    colors = {"S": "blue", "I": "red", "R": "green"}

    ax.plot(result.t, result.S, color=colors["S"], label="Susceptible (S)", linewidth=2)
    ax.plot(result.t, result.I, color=colors["I"], label="Infected (I)", linewidth=2)
    ax.plot(result.t, result.R, color=colors["R"], label="Recovered (R)", linewidth=2)

    if title:
        ax.set_title(title, fontsize=12, fontweight="bold")

    ax.set_xlabel("Time (months)")
    ax.set_ylabel("Number of people")
    ax.legend()
    ax.grid(True, alpha=0.3)

    info_text = f"Peak I: {result.peak_infected}\n"
    info_text += f"Total infected: {result.total_infected}\n"
    info_text += f"Duration: {result.epidemic_duration} months"

    ax.text(
        0.98,
        0.98,
        info_text,
        transform=ax.transAxes,
        ha="right",
        va="top",
        bbox=dict(boxstyle="round", facecolor="wheat", alpha=0.5),
        fontsize=9,
    )

    # Year boundaries
    for month in result.t[12::12]:
        ax.axvline(month, color="gray", linestyle="--", alpha=0.3, linewidth=1)


def plot_result(
    result: SimulationResult, title: str = None, save_path: Optional[str] = None
) -> None:
    """
    Creates a plot of a single SIR simulation result.

    :param result: SimulationResult to visualize
    :param title: Optional custom title
    :param save_path: Optional path to save the plot. If None, displays the plot.
    """
    if title is None:
        title = (
            f"SIR Model - beta={result.rates.infection_rate}, "
            f"gamma={result.rates.recovery_rate}"
        )

    fig, ax = plt.subplots(figsize=(10, 6))
    _plot_sir_curves(ax, result, title)

    if save_path:
        directory = os.path.dirname(save_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        plt.savefig(save_path, dpi=300, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()
        plt.close(fig)


def log_results(result: SimulationResult, log_dir: str = "logs", name: str = "sir_run") -> str:
    """
    Logs a simulation result to a text file with table format.

    :param result: Simulation result to log
    :param log_dir: Directory to save log files (default: "logs")
    :param name: Base name of the log file
    :return: Path of the written log file
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"{name}.txt")

    with open(log_path, "w", encoding="utf-8") as f:
        f.write(
            f"Simulation Log: beta={result.rates.infection_rate}, "
            f"gamma={result.rates.recovery_rate}\n"
        )
        f.write("=" * 70 + "\n\n")

        header = f"{'Year':<8} {'Month':<8} {'S':<14} {'I':<14} {'R':<14} {'Total':<14}\n"
        f.write(header)
        f.write("-" * 70 + "\n")

        for report in result.reports:
            total = report.susceptible + report.infected + report.recovered
            row = (
                f"{report.year:<8} {report.month:<8} {report.susceptible:<14} "
                f"{report.infected:<14} {report.recovered:<14} {total:<14}\n"
            )
            f.write(row)

        f.write("\n" + "=" * 70 + "\n")
        f.write("Summary Statistics:\n")
        f.write(f"  Initial Population: {result.initial_state.total}\n")
        f.write(f"  Final Population: {result.final_state.total}\n")
        f.write(f"  Peak Infected: {result.peak_infected}\n")
        f.write(f"  Total Infected: {result.total_infected}\n")
        f.write(f"  Epidemic Duration: {result.epidemic_duration} months\n")
        f.write(f"  Months Simulated: {len(result.reports)}\n")

    return log_path
