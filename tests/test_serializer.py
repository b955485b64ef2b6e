"""Tests for steam_vdf.serializer."""

import pytest

from steam_vdf.errors import UnsupportedValue
from steam_vdf.nodes import ObjectNode, StringNode
from steam_vdf.parser import parse, parse_text
from steam_vdf.serializer import serialize


APP_MANIFEST_TEXT = (
    '"AppState"\n'
    "{\n"
    '\t"appid"\t\t"440"\n'
    '\t"name"\t\t"Team Fortress 2"\n'
    "}\n"
)


def _nested(depth: int) -> ObjectNode:
    node = ObjectNode.from_dict({"leaf": "x"})
    for level in range(depth):
        node = ObjectNode({f"level{level}": node})
    return node


# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------

def test_app_manifest_is_reproduced():
    root = parse(APP_MANIFEST_TEXT.splitlines())
    assert serialize(root) == APP_MANIFEST_TEXT


def test_string_property():
    node = ObjectNode.from_dict({"appid": "440"})
    assert serialize(node) == '"appid"\t\t"440"\n'


def test_depth_indents_every_line():
    node = ObjectNode.from_dict({"a": {"b": "c"}})
    assert serialize(node, depth=2) == (
        '\t\t"a"\n'
        "\t\t{\n"
        '\t\t\t"b"\t\t"c"\n'
        "\t\t}\n"
    )


def test_empty_object():
    assert serialize(ObjectNode()) == ""
    assert serialize(ObjectNode.from_dict({"a": {}})) == '"a"\n{\n}\n'


def test_order_preserved():
    node = ObjectNode.from_dict({"c": "3", "a": "1", "b": "2"})
    keys = [line.split('"')[1] for line in serialize(node).splitlines()]
    assert keys == ["c", "a", "b"]


def test_no_trailing_blank_line():
    text = serialize(parse(APP_MANIFEST_TEXT.splitlines()))
    assert text.endswith("}\n")
    assert not text.endswith("\n\n")


def test_no_escaping():
    node = ObjectNode.from_dict({"path": "C:\\Games\\Steam"})
    assert serialize(node) == '"path"\t\t"C:\\Games\\Steam"\n'


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

def test_unsupported_value():
    node = ObjectNode.from_dict({"ok": "1"})
    node["bad"] = 42
    with pytest.raises(UnsupportedValue) as exc_info:
        serialize(node)
    assert exc_info.value.key == "bad"


def test_unsupported_nested_value():
    inner = ObjectNode()
    inner["bad"] = ["list"]
    with pytest.raises(UnsupportedValue):
        serialize(ObjectNode({"outer": inner}))


def test_negative_depth():
    with pytest.raises(ValueError):
        serialize(ObjectNode(), depth=-1)


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------

class TestRoundTrip:
    TREES = [
        {"AppState": {"appid": "440", "name": "Team Fortress 2"}},
        {
            "libraryfolders": {
                "0": {"path": "/home/user/.local/share/Steam", "apps": {"440": "1", "570": "2"}},
                "1": {"path": "/mnt/games", "apps": {}},
            }
        },
        {"a": {"b": {"c": {"d": {"e": "deep"}}}, "after": "value"}, "second": {}},
        {"z": {"9": "", "1": "one", "a": "A"}},
    ]

    @pytest.mark.parametrize("data", TREES)
    def test_parse_serialize(self, data):
        tree = ObjectNode.from_dict(data)
        assert parse(serialize(tree).splitlines()) == tree

    @pytest.mark.parametrize("data", TREES)
    def test_serialize_idempotent(self, data):
        text = serialize(ObjectNode.from_dict(data))
        assert serialize(parse_text(text)) == text

    @pytest.mark.parametrize("name", ["Half\u2028Life", "A\x85B", "form\x0cfeed", "sep\x1crecord"])
    def test_unicode_line_breaks_survive(self, name):
        tree = ObjectNode.from_dict({"AppState": {"name": name, "appid": "70"}})
        assert parse_text(serialize(tree)) == tree

    @pytest.mark.parametrize("depth", [1, 3, 8])
    def test_depth_fidelity(self, depth):
        tree = _nested(depth)
        lines = serialize(tree).splitlines()
        leaf_line = next(line for line in lines if '"leaf"' in line)
        assert leaf_line == "\t" * depth + '"leaf"\t\t"x"'
        assert parse(lines) == tree
