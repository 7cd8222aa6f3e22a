"""Unit tests for scope chain snapshots and serialization."""

import json
from unittest.mock import patch

import pytest

from scriptenv import Binding
from scriptenv.core.config import reload_config
from scriptenv.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_dict,
    restore,
    serialize,
    snapshot,
)


class TestSnapshot:
    """Tests for capturing chains."""

    def test_captures_chain(self, three_levels) -> None:
        _, a, b = three_levels
        a.set("y", 2, {"doc": "middle"})
        snap = snapshot(b)

        assert snap.depth == 2
        assert not snap.is_global
        assert snap.variables == []
        assert snap.parent.variables[0].name == "y"
        assert snap.parent.variables[0].meta == {"doc": "middle"}
        assert snap.parent.parent.is_global
        assert [v.name for v in snap.parent.parent.variables] == ["self", "x"]

    def test_depth_limit(self, monkeypatch) -> None:
        monkeypatch.setenv("SCRIPTENV_MAX_SNAPSHOT_DEPTH", "2")
        reload_config()

        binding = Binding().child().child().child()
        with pytest.raises(SerializationError) as exc_info:
            snapshot(binding)
        assert "max_snapshot_depth 2" in exc_info.value.details

    def test_empty_name_captured(self) -> None:
        snap = snapshot(Binding().set("", 1))
        assert snap.variables[0].name == ""
        assert deserialize(serialize(Binding().set("", 1))).get("") == 1

    def test_non_string_meta_keys(self) -> None:
        binding = Binding().set("v", 1, {1: "numbered"})
        with pytest.raises(SerializationError) as exc_info:
            snapshot(binding)
        assert exc_info.value.message == "Scope chain can't be captured"
        assert "meta" in exc_info.value.details

    def test_restore_rebuilds_fresh_chain(self, three_levels) -> None:
        root, a, b = three_levels
        b.set("x", 2, {"doc": "shadow"})
        rebuilt = restore(snapshot(b))

        assert rebuilt is not b
        assert rebuilt.depth() == 2
        assert rebuilt.get("x") == 2
        assert rebuilt.get_meta("x") == {"doc": "shadow"}
        assert rebuilt.root().get("x") == 1
        assert rebuilt.self() == "host"

        rebuilt.set_global("new", 1)
        assert not root.resolves("new")


class TestJson:
    """Tests for the JSON form."""

    def test_serialize_is_json(self, three_levels) -> None:
        _, _, b = three_levels
        data = json.loads(serialize(b))
        assert data["depth"] == 2
        assert data["parent"]["parent"]["is_global"] is True

    def test_json_round_trip(self) -> None:
        root = Binding().set("count", 3, {"doc": "counter"})
        inner = root.child().set("names", ["a", "b"])
        rebuilt = deserialize(serialize(inner))

        assert rebuilt.get("names") == ["a", "b"]
        assert rebuilt.get("count") == 3
        assert rebuilt.get_meta("count") == {"doc": "counter"}
        assert rebuilt.parent.is_global()

    def test_unserializable_value(self) -> None:
        binding = Binding().set("obj", object())
        with pytest.raises(SerializationError) as exc_info:
            serialize(binding)
        assert exc_info.value.message == "Failed to serialize scope chain"

    def test_invalid_json(self) -> None:
        with pytest.raises(SerializationError) as exc_info:
            deserialize("{not json")
        assert exc_info.value.message == "Invalid JSON format"
        assert "Line 1" in exc_info.value.details

    def test_invalid_shape(self) -> None:
        with pytest.raises(SerializationError) as exc_info:
            deserialize_from_dict({"depth": -1, "is_global": True})
        assert exc_info.value.message == "Snapshot validation failed"
        assert "depth" in exc_info.value.details

    def test_deeply_nested_json(self) -> None:
        nested = "[" * 100000 + "]" * 100000
        with pytest.raises(SerializationError) as exc_info:
            deserialize('{"depth": 0, "is_global": true, "parent": ' + nested + "}")
        assert exc_info.value.message == "Failed to deserialize scope chain"

    def test_restore_failure_wrapped(self) -> None:
        def broken_restore(captured):
            raise RuntimeError("rebuild failed")

        data = {"depth": 0, "is_global": True, "variables": []}
        with patch("scriptenv.core.serializer.restore", broken_restore):
            with pytest.raises(SerializationError) as exc_info:
                deserialize_from_dict(data)
        assert exc_info.value.message == "Failed to deserialize scope chain"
        assert exc_info.value.details == "rebuild failed"
