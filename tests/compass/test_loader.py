import json
import logging
import pytest
import yaml
from pathlib import Path

from services.compass_engine.loader import load_dataset_data, load_dataset_from_file
from services.compass_engine.models import CompassDataset, DatasetLoadError

BUNDLED_DATASET_PATH = Path(__file__).resolve().parents[2] / "assets" / "political_compass.yml"


def test_minimal_dataset_loads(dataset):
    assert isinstance(dataset, CompassDataset)
    assert dataset.axis_ids == ("econ", "auth")
    assert dataset.categories == ("economy", "governance")
    assert dataset.skip_threshold == 1
    assert dataset.total_standard_questions() == 4
    assert len(dataset.comprehensive_questions) == 2


def test_axis_label_aliases(dataset):
    assert dataset.meta.axes["econ"].left == "Equality"
    assert dataset.meta.axes["auth"].left == "Liberty"
    assert dataset.meta.axes["auth"].right == "Order"


def test_category_labels_fall_back_to_id(dataset):
    assert dataset.category_label("economy") == "Economy"
    assert dataset.category_label("governance") == "governance"


def test_missing_category_becomes_empty_pool(dataset_data, caplog):
    dataset_data["meta"]["question_logic"]["categories"].append("culture")
    with caplog.at_level(logging.WARNING):
        dataset = load_dataset_data(dataset_data)
    assert dataset.category_pool("culture") == []
    assert "culture" in caplog.text


def test_unknown_question_category_is_warned(dataset_data, caplog):
    dataset_data["questions"]["stray"] = dataset_data["questions"]["economy"][:1]
    with caplog.at_level(logging.WARNING):
        dataset = load_dataset_data(dataset_data)
    assert "stray" not in dataset.categories
    assert "stray" in caplog.text


def test_archetype_optional_fields(dataset_data):
    dataset_data["ideologies"][0].update({
        "figures": "Adam Smith",
        "quote": {"text": "Quoted", "author": "Someone"},
        "books": None,
    })
    dataset_data["ideologies"][1]["quote"] = "Plain quote"
    dataset = load_dataset_data(dataset_data)

    liberal, socialist = dataset.ideologies[0], dataset.ideologies[1]
    assert liberal.figures == ["Adam Smith"]
    assert liberal.quote.origin == "Quoted"
    assert liberal.quote.source == "Someone"
    assert liberal.books == []
    assert socialist.quote.origin == "Plain quote"
    assert socialist.quote.source is None
    assert dataset.ideologies[2].display_name == "Centrist"


@pytest.mark.parametrize("mutate", [
    lambda d: d["meta"].update(axes={}),
    lambda d: d["meta"]["question_logic"].update(categories=[]),
    lambda d: d["meta"]["question_logic"].update(categories=["economy", "economy"]),
    lambda d: d.update(ideologies=[]),
    lambda d: d.pop("ideologies"),
    lambda d: d["questions"]["economy"][0].update(options=[]),
    lambda d: d["meta"]["question_logic"].update(questions_per_category_before_skip=-1),
    lambda d: d["meta"]["question_logic"].update(comprehensive_interval=0),
    lambda d: d["ideologies"][0].update(stats={"econ": "lots"}),
])
def test_malformed_dataset_is_rejected(dataset_data, mutate):
    mutate(dataset_data)
    with pytest.raises(DatasetLoadError):
        load_dataset_data(dataset_data)


def test_non_mapping_is_rejected():
    with pytest.raises(DatasetLoadError):
        load_dataset_data(["not", "a", "dataset"])


def test_load_from_json_and_yaml(tmp_path, dataset_data):
    json_path = tmp_path / "data.json"
    json_path.write_text(json.dumps(dataset_data, ensure_ascii=False), encoding="utf-8")
    yaml_path = tmp_path / "data.yml"
    yaml_path.write_text(yaml.dump(dataset_data, allow_unicode=True, sort_keys=False), encoding="utf-8")

    from_json = load_dataset_from_file(str(json_path))
    from_yaml = load_dataset_from_file(str(yaml_path))
    assert from_json.axis_ids == from_yaml.axis_ids
    assert [i.name for i in from_json.ideologies] == [i.name for i in from_yaml.ideologies]


def test_file_errors(tmp_path):
    with pytest.raises(DatasetLoadError, match="File not found"):
        load_dataset_from_file(str(tmp_path / "missing.json"))

    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(DatasetLoadError, match="empty"):
        load_dataset_from_file(str(empty))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetLoadError, match="JSON"):
        load_dataset_from_file(str(broken))

    broken_yaml = tmp_path / "broken.yaml"
    broken_yaml.write_text("meta: [unclosed", encoding="utf-8")
    with pytest.raises(DatasetLoadError, match="YAML"):
        load_dataset_from_file(str(broken_yaml))

    with pytest.raises(DatasetLoadError, match="Unsupported"):
        load_dataset_from_file(str(tmp_path / "data.csv"))


def test_bundled_dataset_loads():
    dataset = load_dataset_from_file(str(BUNDLED_DATASET_PATH))
    assert dataset.categories == ("economy", "diplomacy", "governance", "culture", "environment")
    assert dataset.meta.question_logic.comprehensive_interval == 5
    assert any("中间派" in ideology.name for ideology in dataset.ideologies)
    for category in dataset.categories:
        assert len(dataset.category_pool(category)) >= dataset.skip_threshold
