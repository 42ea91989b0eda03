import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from settlement.targets import (
    NFL_TEAM_TOKENS,
    SettlementTarget,
    TargetMap,
    TargetMappingError,
    load_target_map,
)

BURNER = "0x" + "ab" * 20


def test_default_table_maps_display_names_to_token_names():
    targets = load_target_map()
    assert len(targets) == len(NFL_TEAM_TOKENS) == 32
    assert targets.lookup("Los Angeles Chargers").value == "Los Angeles (C)"
    assert targets.lookup("New York Jets").argument == "New York (J)"


def test_lookup_is_case_sensitive_and_reports_missing():
    targets = TargetMap.from_names({"Buffalo Bills": "Buffalo"})
    with pytest.raises(TargetMappingError):
        targets.lookup("buffalo bills")
    with pytest.raises(TargetMappingError):
        targets.lookup("Toronto Argonauts")


def test_inline_targets_with_secondary_contracts():
    payload = {
        "Buffalo Bills": {"value": "Buffalo", "secondary_address": BURNER},
        "Miami Dolphins": "Miami",
    }
    targets = load_target_map(inline=json.dumps(payload))

    bills = targets.lookup("Buffalo Bills")
    assert bills.secondary_address == BURNER
    assert targets.lookup("Miami Dolphins").secondary_address is None
    assert "Dallas Cowboys" not in targets


def test_invalid_entries_are_skipped(tmp_path: Path):
    path = tmp_path / "targets.json"
    path.write_text(
        json.dumps(
            [
                {"team": "Buffalo Bills", "value": "Buffalo"},
                {"team": "Miami Dolphins", "value": "Miami", "secondary_address": "0xnothex"},
                {"team": "Buffalo Bills", "value": "Duplicate"},
            ]
        ),
        encoding="utf-8",
    )
    targets = load_target_map(path=path)

    assert len(targets) == 1
    assert targets.lookup("Buffalo Bills").value == "Buffalo"


def test_entirely_invalid_configuration_fails_fast():
    with pytest.raises(ValueError):
        load_target_map(inline="not json")


def test_address_kind_requires_addresses():
    with pytest.raises(ValidationError):
        SettlementTarget(team="Buffalo Bills", kind="address", value="Buffalo")

    target = SettlementTarget(team="Buffalo Bills", kind="address", value=BURNER)
    assert target.argument.lower() == BURNER
    assert target.argument != BURNER


def test_mixed_kinds_are_rejected():
    with pytest.raises(ValueError):
        TargetMap(
            [
                SettlementTarget(team="Buffalo Bills", kind="address", value=BURNER),
                SettlementTarget(team="Miami Dolphins", kind="name", value="Miami"),
            ],
            kind="address",
        )


def test_address_kind_without_configuration_is_an_error():
    with pytest.raises(ValueError):
        load_target_map(kind="address")


def test_address_kind_skips_name_entries():
    payload = [
        {"team": "Buffalo Bills", "value": BURNER},
        {"team": "Miami Dolphins", "kind": "name", "value": "Miami"},
    ]
    targets = load_target_map(kind="address", inline=json.dumps(payload))

    assert targets.kind == "address"
    assert len(targets) == 1
    assert targets.lookup("Buffalo Bills").argument.lower() == BURNER
