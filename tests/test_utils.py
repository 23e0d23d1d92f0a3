import pytest

from sirsim.sir import PopulationState, RateParameters
from sirsim.simulation import Report, SimulationDriver
from sirsim.utils import format_report, log_results, plot_result


@pytest.fixture
def result():
    driver = SimulationDriver(
        PopulationState(susceptible=100000, infected=25000, recovered=500),
        RateParameters(infection_rate=0.05, recovery_rate=0.02),
        total_months=14,
    )
    return driver.run()


def test_format_report():
    report = Report(1, 2, 3, 4, 5)
    assert format_report(report) == "Year 1, Month 2 - Susceptible: 3, Infected: 4, Recovered: 5"
    assert format_report(report, csv=True) == "14, 3, 4, 5"


def test_log_results(result, tmp_path):
    log_path = log_results(result, log_dir=str(tmp_path / "logs"), name="reference")

    assert log_path.endswith("reference.txt")
    with open(log_path, encoding="utf-8") as f:
        content = f.read()

    assert "Simulation Log: beta=0.05, gamma=0.02" in content
    assert "95000" in content
    assert f"Peak Infected: {result.peak_infected}" in content
    assert "Months Simulated: 14" in content
    # One table row per month
    rows = [line for line in content.splitlines() if line[:1].isdigit()]
    assert len(rows) == 14


def test_plot_result(result, tmp_path):
    save_path = tmp_path / "sir.png"
    plot_result(result, save_path=str(save_path))
    assert save_path.exists()
    assert save_path.stat().st_size > 0
