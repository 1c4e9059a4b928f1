import json

from utils.files import clean_dir, find_file_name_by_prefix, read_json, write_json


def test_find_file_name_by_prefix(tmp_path):
    for name in ["reviews_b.json", "places_2024.json", "reviews_a.json"]:
        (tmp_path / name).write_text("[]")

    assert find_file_name_by_prefix(tmp_path, "reviews_") == "reviews_a.json"
    assert find_file_name_by_prefix(tmp_path, "photos_") is None


def test_find_file_name_by_prefix_missing_directory(tmp_path):
    assert find_file_name_by_prefix(tmp_path / "nope", "x") is None


def test_clean_dir_removes_files_and_directories(tmp_path):
    (tmp_path / "a.tmp").write_text("x")
    (tmp_path / "b.tmp").write_text("x")
    (tmp_path / "keep.json").write_text("x")
    nested = tmp_path / "run.tmp"
    nested.mkdir()
    (nested / "inner.txt").write_text("x")

    assert clean_dir(str(tmp_path / "*.tmp")) == 3
    assert sorted(p.name for p in tmp_path.iterdir()) == ["keep.json"]
    assert clean_dir(str(tmp_path / "*.tmp")) == 0


def test_write_json_is_pretty_and_leaves_no_temp_files(tmp_path):
    target = tmp_path / "out.json"
    data = [{"name": "Ñandú"}, {"n": 2}]

    assert write_json(target, data) == target
    assert target.read_text(encoding="utf-8") == json.dumps(data, indent=2, ensure_ascii=False)
    assert [p.name for p in tmp_path.iterdir()] == ["out.json"]
    assert read_json(target) == data


def test_read_json_default(tmp_path):
    assert read_json(tmp_path / "missing.json", default=[]) == []
