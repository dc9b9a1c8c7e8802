from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from flakeid.cli import main
from flakeid.layout import compose, decode

STAMP_MS = 1_704_164_645_006


def test_mint_prints_requested_count(capsys):
    assert main(["mint", "-n", "3", "--datacenter-id", "4", "--machine-id", "5"]) == 0

    lines = capsys.readouterr().out.split()
    assert len(lines) == 3
    values = [int(line) for line in lines]
    assert len(set(values)) == 3
    assert all((decode(v).datacenter_id, decode(v).machine_id) == (4, 5) for v in values)


def test_mint_uses_environment_node(monkeypatch, capsys):
    monkeypatch.setenv("IDGEN_DATACENTER_ID", "7")
    monkeypatch.setenv("IDGEN_MACHINE_ID", "1")

    assert main(["mint", "--format"]) == 0

    value, rendered = capsys.readouterr().out.strip().split("\t")
    assert decode(int(value)).datacenter_id == 7
    assert rendered.endswith("@(7, 1)")


def test_mint_rejects_bad_node_id(capsys):
    assert main(["mint", "--datacenter-id", "40"]) == 1
    assert "datacenter_id" in capsys.readouterr().err


def test_mint_rejects_non_positive_count():
    with pytest.raises(SystemExit) as excinfo:
        main(["mint", "-n", "0"])
    assert excinfo.value.code == 2


def test_decode_prints_json_per_id(capsys):
    value = compose(STAMP_MS, 1, 2, 7)

    assert main(["decode", str(value), hex(value)]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    for line in lines:
        assert json.loads(line) == {
            "id": value,
            "timestamp_ms": STAMP_MS,
            "datacenter_id": 1,
            "machine_id": 2,
            "sequence": 7,
        }


def test_format_prints_readable_form(capsys):
    assert main(["format", str(compose(STAMP_MS, 1, 2, 7))]) == 0
    assert capsys.readouterr().out.strip() == "2024-01-02 03:04:05.006, #7, @(1, 2)"


@pytest.mark.parametrize("argv", [["decode", "abc"], ["format", "1", "--tz", "Nowhere/Atlantis"], []])
def test_argument_errors_exit_with_usage(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_describe_prints_generator_state(capsys):
    assert main(["describe", "--datacenter-id", "2", "--machine-id", "3"]) == 0

    info = json.loads(capsys.readouterr().out)
    assert info["datacenter_id"] == 2
    assert info["machine_id"] == 3
    assert info["SEQUENCE_BITS"] == 12
    assert info["last_timestamp"] == -1


def test_mint_reports_node_error_once(capsys):
    assert main(["mint", "--machine-id", "-1"]) == 1

    err = capsys.readouterr().err
    assert err.count("machine_id must be an integer between 0 and 31") == 1


def test_unknown_log_level_fails_settings_validation(monkeypatch):
    monkeypatch.setenv("IDGEN_LOG_LEVEL", "verbose")

    with pytest.raises(ValidationError):
        main(["decode", "1"])


def test_format_renders_requested_zone(capsys):
    assert main(["format", str(compose(STAMP_MS, 1, 2, 7)), "--tz", "Asia/Tokyo"]) == 0
    assert capsys.readouterr().out.strip() == "2024-01-02 12:04:05.006, #7, @(1, 2)"
