"""
Unit tests for rubric loading.
"""
import json

from app.services.rubric_service import DEFAULT_RUBRIC, load_rubric, rubric_filename


def test_rubric_filename_is_a_safe_slug():
    assert rubric_filename("Backend Dev") == "backend_dev.json"
    assert rubric_filename("../../etc/passwd") == "etc_passwd.json"
    assert rubric_filename(None) == "general.json"
    assert rubric_filename("  ") == "general.json"


def test_bundled_backend_rubric():
    rubric = load_rubric("backend")
    assert rubric.name == "Backend Engineer"
    assert len(rubric.items) == 5


def test_missing_file_uses_default(tmp_path):
    assert load_rubric("designer", rubrics_dir=str(tmp_path)) is DEFAULT_RUBRIC


def test_role_file_in_custom_directory(tmp_path):
    data = {
        "name": "Data",
        "items": [{"id": "sql", "label": "SQL", "keywords": ["sql", "쿼리"]}],
        "suggestions": ["쿼리 최적화 사례를 말해 보세요."],
    }
    (tmp_path / "data_engineer.json").write_text(json.dumps(data), encoding="utf-8")

    rubric = load_rubric("Data Engineer", rubrics_dir=str(tmp_path))
    assert rubric.name == "Data"
    assert rubric.items[0].keywords == ["sql", "쿼리"]


def test_invalid_json_uses_default(tmp_path):
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    assert load_rubric("broken", rubrics_dir=str(tmp_path)) is DEFAULT_RUBRIC


def test_invalid_shape_uses_default(tmp_path):
    (tmp_path / "odd.json").write_text(json.dumps({"items": [{"label": "no id"}]}), encoding="utf-8")
    assert load_rubric("odd", rubrics_dir=str(tmp_path)) is DEFAULT_RUBRIC


def test_empty_items_use_default(tmp_path):
    (tmp_path / "empty.json").write_text(json.dumps({"name": "Empty", "items": []}), encoding="utf-8")
    assert load_rubric("empty", rubrics_dir=str(tmp_path)) is DEFAULT_RUBRIC
