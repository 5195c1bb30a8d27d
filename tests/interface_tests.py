"""
Tests for the run.py entry point
"""
from .context import Response, RunMode, parse_args_and_start, parse_degrees


def test_no_run_mode():
    resp = parse_args_and_start([])
    assert not resp.success
    assert "run-mode" in resp.error_message


def test_invalid_run_mode():
    resp = parse_args_and_start(["repl"])
    assert not resp.success
    assert "repl" in resp.error_message


def test_help():
    resp = parse_args_and_start(["help"])
    assert resp.success
    assert resp.status == RunMode.Help


def test_parse_degrees():
    assert parse_degrees(["3", "5"]).body == (3, 5)
    assert parse_degrees([]).body == ()
    assert not parse_degrees(["2"]).success
    assert not parse_degrees(["three"]).success


def test_parse_degrees_rejects_non_decimal_digits():
    # superscripts are digits, but int() rejects them
    resp = parse_degrees(["\u00b2"])
    assert not resp.success
    assert not parse_args_and_start(["stress", "5", "\u00b2"]).success


def test_stress_with_invalid_degree():
    resp = parse_args_and_start(["stress", "2"])
    assert not resp.success
    assert "2" in resp.error_message


def test_stress_run_mode():
    resp = parse_args_and_start(["stress", "5"])
    assert resp.success
    assert resp.status == RunMode.Stress
    assert resp.body > 0


def test_response_str():
    assert str(Response(True, body=3)) == "Response(success, 3)"
    assert str(Response(False, error_message="boom")) == "Response(fail, boom)"
