"""Unit tests for external lookups and the process environment store."""

from __future__ import annotations

import os

import pytest

from envpipe.environment import ExternalLookup, MappingLookup, ProcessEnvironment, as_lookup


def test_process_environment_wraps_injected_mapping() -> None:
    """Reads and writes go to the injected mapping."""

    backing = {"HOME": "/home/me"}
    environment = ProcessEnvironment(backing)

    environment.set("APP", "1")

    assert environment.get("HOME") == "/home/me"
    assert environment.get("NOPE") is None
    assert environment.has("APP")
    assert backing == {"HOME": "/home/me", "APP": "1"}


def test_process_environment_snapshot_is_detached() -> None:
    """Snapshots do not follow later writes."""

    environment = ProcessEnvironment({"A": "1"})
    snapshot = environment.snapshot()

    environment.set("B", "2")

    assert snapshot == {"A": "1"}


def test_process_environment_defaults_to_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an injected mapping the real process environment is used."""

    monkeypatch.setenv("ENVPIPE_TEST_VALUE", "present")

    assert ProcessEnvironment().get("ENVPIPE_TEST_VALUE") == "present"
    ProcessEnvironment().set("ENVPIPE_TEST_VALUE", "changed")
    assert os.environ["ENVPIPE_TEST_VALUE"] == "changed"


def test_lookups_satisfy_protocol() -> None:
    """Both lookups are recognized as `ExternalLookup` implementations."""

    assert isinstance(MappingLookup({}), ExternalLookup)
    assert isinstance(ProcessEnvironment({}), ExternalLookup)


def test_as_lookup_wraps_mappings_and_passes_others_through() -> None:
    """Plain mappings are wrapped; lookups and `None` pass through unchanged."""

    environment = ProcessEnvironment({})
    lookup = as_lookup({"A": "1"})

    assert isinstance(lookup, MappingLookup)
    assert lookup.get("A") == "1"
    assert as_lookup(environment) is environment
    assert as_lookup(None) is None
