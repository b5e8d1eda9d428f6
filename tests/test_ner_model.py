# -*- coding: utf-8 -*-
"""
Tests

Tests cover:
    - Training an entity extracter from labeled records
    - Entity extraction on tagged tokens
    - Writing a model and loading it back
"""
import pytest

from lexitag.chunker import Entity
from lexitag.model_io import MAXENT_DIR, TAGGER_DIR
from lexitag.ner_model import EntityExtracter, Model, train_entity_extracter
from lexitag.process_data import EntityContext, LabeledEntity, assign_labels
from lexitag.tokenizer import IterTokenizer


@pytest.fixture
def model(reference_tagger, product_records):
    return Model.from_data("PRODUCT", product_records, reference_tagger)


def test_train_entity_extracter_labels(reference_tagger, product_records):
    extracter = train_entity_extracter(product_records, reference_tagger, IterTokenizer(), rounds=3)
    assert isinstance(extracter, EntityExtracter)
    assert extracter.classifier.labels == ["B-PRODUCT", "I-PRODUCT", "O", "B-PERSON", "I-PERSON"]


def test_rejected_records_only_add_outside_labels(reference_tagger):
    records = [
        EntityContext("Windows 10 is an operating system", [LabeledEntity(0, 10, "PRODUCT")]),
        EntityContext("Windows is new", [LabeledEntity(0, 7, "GAME")], accept=False),
    ]
    extracter = train_entity_extracter(records, reference_tagger, rounds=1)
    assert "B-GAME" not in extracter.classifier.labels


def test_classify_reproduces_training_labels(model, product_records):
    tokenizer = IterTokenizer()
    for record in product_records:
        tokens = model.tag(tokenizer.tokenize(record.text))
        gold = assign_labels(tokens, record)
        predicted = [t.label for t in model.extracter.classify(tokens)]
        assert predicted == gold


def test_extract_entities(model):
    tokens = IterTokenizer().tokenize("Windows 10 is an operating system")
    assert model.extract(tokens) == [Entity(label="PRODUCT", text="Windows 10")]
    assert [t.tag for t in tokens] == ["NNP", "CD", "VBZ", "DT", "NN", "NN"]

    tokens = IterTokenizer().tokenize("Pierre Vinken is a director")
    assert model.extract(tokens) == [Entity(label="PERSON", text="Pierre Vinken")]


def test_write_and_load(model, tmp_path):
    path = tmp_path / "PRODUCT"
    model.write(path)
    assert (path / MAXENT_DIR).is_dir()
    assert (path / TAGGER_DIR).is_dir()

    loaded = Model.from_disk(path)
    assert loaded.name == "PRODUCT"
    tokens = IterTokenizer().tokenize("Windows 10 is an operating system")
    assert loaded.extract(tokens) == [Entity(label="PRODUCT", text="Windows 10")]
