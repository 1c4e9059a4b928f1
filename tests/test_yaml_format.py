import yaml

from utils.yaml_format import obj_to_yaml


def test_indents_every_line_and_keeps_key_order():
    record = {"name": "Blue Bottle", "url": "https://example.com/a:b", "tags": ["coffee", "cafe"]}
    out = obj_to_yaml(record)

    lines = [line for line in out.split("\n") if line]
    assert lines[0] == "  name: Blue Bottle"
    assert all(line.startswith("  ") for line in lines)
    assert out.endswith("\n")
    assert yaml.safe_load(out) == record


def test_zero_indent_is_plain_dump():
    record = {"b": 1, "a": {"nested": True}}
    assert obj_to_yaml(record, 0) == "b: 1\na:\n  nested: true\n"


def test_unicode_kept():
    assert "Café" in obj_to_yaml({"name": "Café"}, 4)
