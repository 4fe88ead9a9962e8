from pathlib import Path

import pytest
import yaml

from src.rules.loader import load_rules
from src.rules.models import DEFAULT_RULES, Rules


def write_rules(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(content)
    return path


@pytest.fixture
def project_root():
    return Path(__file__).parent.parent.parent


def test_load_project_rules(project_root):
    rules = load_rules(project_root / "rules.yaml")

    assert isinstance(rules, Rules)
    assert rules.overlap.boundary_inclusive is True
    assert rules.summary.episode_label == "episode"
    assert rules.periods.format == "%Y-%m"


def test_project_rules_match_defaults(project_root):
    assert load_rules(project_root / "rules.yaml").model_dump() == DEFAULT_RULES.model_dump()


def test_partial_rules_fill_defaults(tmp_path):
    path = write_rules(tmp_path, yaml.dump({"overlap": {"boundary_inclusive": False}}))

    rules = load_rules(path)

    assert rules.overlap.boundary_inclusive is False
    assert rules.summary.decimals == 2
    assert rules.storage.db_path == "episodes.db"


def test_empty_file_is_all_defaults(tmp_path):
    assert load_rules(write_rules(tmp_path, "")).model_dump() == DEFAULT_RULES.model_dump()


def test_fenced_yaml_block(tmp_path):
    content = "# Rules\n\nSome prose.\n\n```yaml\nsummary:\n  episode_label: breakthrough\n```\n"

    rules = load_rules(write_rules(tmp_path, content))

    assert rules.summary.episode_label == "breakthrough"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(write_rules(tmp_path, "overlap: [unclosed"))


def test_schema_violation(tmp_path):
    path = write_rules(tmp_path, yaml.dump({"summary": {"decimals": -1}}))
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)
