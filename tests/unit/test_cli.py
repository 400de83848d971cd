"""
Unit Tests - Command Line
"""
import json
import logging

import pytest
import polars as pl

from sales_reporting.cli import main


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger onto the captured stderr"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'reports.db'}"
    assert main(["--database-url", url, "seed", "--orders", "60", "--customers", "10"]) == 0
    return url


def test_list(capsys):
    assert main(["list", "--json"]) == 0

    catalogue = json.loads(capsys.readouterr().out)
    assert [entry["number"] for entry in catalogue] == list(range(1, 15))


def test_seed_refuses_to_reseed(database_url, capsys):
    assert main(["--database-url", database_url, "seed"]) == 1
    assert "--force" in capsys.readouterr().err


def test_seed_force_rebuilds(database_url):
    assert main(["--database-url", database_url, "seed", "--orders", "20", "--force"]) == 0


def test_run_prints_json(database_url, capsys):
    capsys.readouterr()
    assert main(["--database-url", database_url, "run", "top-products-by-quantity", "--limit", "3", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["parameters"] == {"limit": 3}
    assert payload["row_count"] == 3


def test_run_exports(database_url, tmp_path):
    target = tmp_path / "exports" / "territories.parquet"
    code = main([
        "--database-url", database_url,
        "run", "sales-by-territory",
        "--output", str(target),
        "--format", "parquet",
    ])

    assert code == 0
    assert pl.read_parquet(target).columns == ["territory", "total_sales"]


def test_invalid_parameter_exits_non_zero(database_url, capsys):
    assert main(["--database-url", database_url, "run", "monthly-sales", "--year", "20x4"]) == 2
    assert "Invalid value for 'year'" in capsys.readouterr().err


def test_unknown_report_exits_non_zero(database_url, capsys):
    assert main(["--database-url", database_url, "run", "sales-by-planet"]) == 2
    assert "Unknown report" in capsys.readouterr().err


def test_year_past_the_calendar_end_exits_non_zero(database_url, capsys):
    assert main(["--database-url", database_url, "run", "monthly-sales", "--year", "9999"]) == 2
    assert "Invalid value for 'year'" in capsys.readouterr().err


@pytest.mark.parametrize("option,value", [("--customers", "0"), ("--orders", "-3"), ("--orders", "many")])
def test_seed_rejects_non_positive_counts(tmp_path, capsys, option, value):
    url = f"sqlite+aiosqlite:///{tmp_path / 'reports.db'}"
    with pytest.raises(SystemExit) as exc:
        main(["--database-url", url, "seed", option, value])

    assert exc.value.code == 2
    assert option in capsys.readouterr().err
