import json

import pytest

from app.advisory.guidelines import (
    CATEGORY_GUIDELINES,
    AdvisoryConfig,
    CategoryGuideline,
    RetirementAssumptions,
    load_advisory_config,
)


def test_unknown_category_uses_default_guideline_and_tips():
    config = AdvisoryConfig()
    assert config.guideline_for("Pets") == CategoryGuideline(ideal=0.1, high=0.15)
    assert config.tips_for("Pets")[0].startswith("Track all expenses")
    assert not config.is_known_category("Pets")
    assert not config.is_known_category("default")


def test_lookup_is_case_sensitive():
    config = AdvisoryConfig()
    assert config.is_known_category("Housing")
    assert not config.is_known_category("housing")


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        CATEGORY_GUIDELINES["Travel"] = CategoryGuideline(ideal=0.05, high=0.1)


def test_load_config_merges_overrides(tmp_path):
    overrides = tmp_path / "guidelines.json"
    overrides.write_text(json.dumps({
        "Food": {"ideal": 0.2, "high": 0.3},
        "Travel": {"ideal": 0.05, "high": 0.1},
    }))

    config = load_advisory_config(overrides)
    assert config.guideline_for("Food") == CategoryGuideline(ideal=0.2, high=0.3)
    assert config.is_known_category("Travel")
    assert config.guideline_for("Housing") == CATEGORY_GUIDELINES["Housing"]
    # Built-in table is untouched
    assert CATEGORY_GUIDELINES["Food"].ideal == 0.15


def test_load_config_ignores_missing_file(tmp_path):
    config = load_advisory_config(tmp_path / "missing.json")
    assert config.guidelines == CATEGORY_GUIDELINES


def test_retirement_assumptions_validation():
    assert RetirementAssumptions().years_to_retirement == 30
    assert RetirementAssumptions().life_expectancy == 80
    with pytest.raises(ValueError):
        RetirementAssumptions(current_age=60, retirement_age=60)
