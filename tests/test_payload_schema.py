# tests/test_payload_schema.py
import json

from apps.cli.demo_cli import build_payload


def test_payload_shape():
    payload = build_payload("Hard", seed=21, walkthrough=4)
    assert set(payload.keys()) == {
        "difficulty", "seed", "puzzle", "solution", "empty_cells",
        "candidates_count", "next_hint", "moves",
    }
    assert payload["empty_cells"] == 55
    assert [m["index"] for m in payload["moves"]] == [1, 2, 3, 4]
    assert payload["moves"][0]["cell"] == payload["next_hint"]["cell"]
    json.dumps(payload)


def test_payload_without_walkthrough():
    payload = build_payload("Easy", seed=2)
    assert "moves" not in payload
    assert payload["next_hint"]["type"] == "placement"
