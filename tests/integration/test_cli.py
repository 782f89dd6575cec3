"""Integration tests for the command-line interface"""

import csv
import json

import pytest
from click.testing import CliRunner

from economy_calc.main import cli, parse_amount

SCHEDULE_ARGS = ["schedule", "-a", "320k", "-r", "3.6", "-y", "10", "-s", "2024-01", "--fee", "25"]


@pytest.fixture
def runner(quiet_settings):
    return CliRunner()


def test_parse_amount():
    assert parse_amount("3.2m") == 3_200_000
    assert parse_amount("450k") == 450_000
    assert parse_amount("1,250,000") == 1_250_000


def test_schedule(runner):
    result = runner.invoke(cli, SCHEDULE_ARGS)

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("Term\tMonth")
    assert lines[1].split("\t")[:2] == ["1", "jan 2024"]
    assert lines[1].split("\t")[3] == "960"
    assert "Total fees         : 3 000" in result.output


def test_schedule_yearly(runner):
    result = runner.invoke(cli, SCHEDULE_ARGS + ["--yearly"])

    assert result.exit_code == 0, result.output
    years = [line.split("\t")[0] for line in result.output.splitlines()[1:11]]
    assert years == [str(y) for y in range(2024, 2034)]


def test_schedule_json_export(runner, tmp_path):
    output = tmp_path / "schedule.json"
    result = runner.invoke(cli, SCHEDULE_ARGS + ["--output", str(output)])

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text(encoding="utf-8"))
    assert len(data["monthly"]) == 120
    assert data["totals"]["totalFees"] == 3000.0


def test_schedule_csv_export(runner, tmp_path):
    output = tmp_path / "schedule.csv"
    result = runner.invoke(cli, SCHEDULE_ARGS + ["--output", str(output)])

    assert result.exit_code == 0, result.output
    with output.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Term", "Month", "Payment", "Interest", "Principal", "Fee", "Balance"]
    assert len(rows) == 121
    assert rows[1][1] == "2024-01"


@pytest.mark.parametrize(
    "args",
    [
        ["schedule", "-a", "lots", "-r", "3", "-y", "10", "-s", "2024-01"],
        ["schedule", "-a", "100k", "-r", "3", "-y", "10", "-s", "January"],
        SCHEDULE_ARGS + ["--output", "schedule.xlsx"],
    ],
)
def test_schedule_rejects_bad_input(runner, args):
    result = runner.invoke(cli, args)

    assert result.exit_code == 2


def test_taxes(runner, economy_file):
    result = runner.invoke(cli, ["taxes", "--economy", str(economy_file)])

    assert result.exit_code == 0, result.output
    assert "Taxes 2025" in result.output
    assert "Gross income       : 655 000" in result.output
    assert "Tax-free income    : 24 000" in result.output
    assert "Interest Car loan" in result.output


def test_taxes_json_export(runner, economy_file, tmp_path):
    output = tmp_path / "taxes.json"
    result = runner.invoke(cli, ["taxes", "--economy", str(economy_file), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text(encoding="utf-8"))["totalIncome"] == 655000.0


def test_taxes_unknown_year(runner, economy_file):
    result = runner.invoke(cli, ["taxes", "--economy", str(economy_file), "--tax-year", "1999"])

    assert result.exit_code == 2
    assert "1999" in result.output


def test_invalid_economy_document(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"loans": "none"}), encoding="utf-8")
    result = runner.invoke(cli, ["taxes", "--economy", str(path)])

    assert result.exit_code == 1
    assert "'loans' must be a list" in result.output


def test_plan(runner, economy_file):
    result = runner.invoke(cli, ["plan", "--economy", str(economy_file), "-s", "2024-01", "--years", "1"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert len(lines) == 13
    assert lines[1].startswith("jan 2024\t")
    assert lines[12].startswith("des 2024\t")


def test_plan_csv_export(runner, economy_file, tmp_path):
    output = tmp_path / "plan.csv"
    result = runner.invoke(
        cli, ["plan", "--economy", str(economy_file), "-s", "2024-01", "--years", "2", "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    with output.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 25
    assert rows[0][-1] == "BalancePlusPrincipal"


def test_equity(runner, economy_file):
    result = runner.invoke(
        cli, ["equity", "--economy", str(economy_file), "--today", "2025-01-15", "--years", "1", "--growth", "3"]
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "Starter home"
    assert lines[2].split("\t") == ["start", "2024-01", "370 000", "320 000", "50 000"]
    assert lines[3].split("\t")[:2] == ["today", "2025-01"]


def test_equity_json_export(runner, economy_file, tmp_path):
    output = tmp_path / "equity.json"
    result = runner.invoke(
        cli, ["equity", "--economy", str(economy_file), "--today", "2025-01-15", "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text(encoding="utf-8"))
    assert [p["label"] for p in data["snapshots"]] == ["start", "today", "+1 year", "+2 years", "+5 years"]
    assert len(data["monthly"]) == 120


def test_equity_requires_active_house(runner, tmp_path, economy_document):
    economy_document["activeHouseId"] = ""
    path = tmp_path / "economy.json"
    path.write_text(json.dumps(economy_document), encoding="utf-8")
    result = runner.invoke(cli, ["equity", "--economy", str(path)])

    assert result.exit_code == 1
    assert "No active house" in result.output


def test_summary(runner, economy_file):
    result = runner.invoke(cli, ["summary", "--economy", str(economy_file)])

    assert result.exit_code == 0, result.output
    assert "Monthly summary" in result.output
    assert "Fixed - housing    : 2 800" in result.output
    assert "Fixed - personal   : 1 100" in result.output
    assert "Equity build-up" in result.output


def test_budget(runner, tmp_path):
    path = tmp_path / "budget.json"
    path.write_text(
        json.dumps(
            {
                "utgifter": {"individspesifikke": {"mat": 3900}, "husholdsspesifikke": {"mobler": 450}},
                "utgifterBeskrivelser": {"individspesifikke": {"mat": {"beskrivelse": "Mat og drikke"}}},
            }
        ),
        encoding="utf-8",
    )
    result = runner.invoke(cli, ["budget", "--payload", str(path)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["Mat og drikke\t3900", "mobler\t450", "Total\t4350"]


def test_budget_malformed_payload(runner, tmp_path):
    path = tmp_path / "budget.json"
    path.write_text(json.dumps({"status": "error"}), encoding="utf-8")
    result = runner.invoke(cli, ["budget", "--payload", str(path)])

    assert result.exit_code == 1
    assert "utgifter" in result.output
