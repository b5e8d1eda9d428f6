# -*- coding: utf-8 -*-
"""
Tests

Tests cover:
    - Log-space addition and summation
    - Vocabulary construction, encoding and GIS correction feature
    - Hard classification and normalized probability distributions
"""
import math

import numpy as np
import pytest

from lexitag.feature_extractor import NER_FEATURE_NAMES
from lexitag.maxent_model import (
    MAX_LOG_DIFF, FeatureVocabulary, MaxentClassifier, ProbDist, TrainingExample,
    add_logs, sum_logs,
)


def _features(word, **overrides):
    values = dict.fromkeys(NER_FEATURE_NAMES, "x")
    values.update({"bias": "True", "word": word})
    values.update(overrides)
    return tuple(values[name] for name in NER_FEATURE_NAMES)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def examples():
    return [
        TrainingExample(_features("Pierre"), "B-PERSON"),
        TrainingExample(_features("Vinken"), "I-PERSON"),
        TrainingExample(_features("joined"), "O"),
    ]


@pytest.fixture
def vocabulary(examples):
    return FeatureVocabulary.build(examples)


# =============================================================================
# LOG-SPACE ARITHMETIC
# =============================================================================

@pytest.mark.parametrize("x,y", [(0.0, 0.0), (-3.5, 2.0), (10.0, 9.0), (-50.0, -20.0)])
def test_add_logs_matches_exact_value_and_commutes(x, y):
    assert add_logs(x, y) == add_logs(y, x)
    assert add_logs(x, y) == pytest.approx(math.log2(2 ** x + 2 ** y))


def test_add_logs_keeps_larger_beyond_floor():
    gap = -MAX_LOG_DIFF + 1.0
    assert add_logs(0.0, -gap) == 0.0
    assert add_logs(-gap, 0.0) == 0.0


def test_add_logs_handles_negative_infinity():
    assert add_logs(-math.inf, 3.0) == 3.0
    assert add_logs(-math.inf, -math.inf) == -math.inf


def test_sum_logs():
    assert sum_logs([]) == -math.inf
    assert sum_logs([1.0, 1.0, 2.0]) == pytest.approx(3.0)


def test_prob_dist_falls_back_to_uniform():
    dist = ProbDist({"A": -math.inf, "B": -math.inf, "C": -math.inf, "D": -math.inf})
    for label in "ABCD":
        assert dist.prob(label) == pytest.approx(0.25)
    assert not any(math.isnan(dist.logprob(label)) for label in "ABCD")


# =============================================================================
# VOCABULARY
# =============================================================================

def test_build_assigns_indices_in_first_seen_order(vocabulary):
    keys = list(vocabulary.mapping)
    assert keys[0] == ("bias", "True", "B-PERSON")
    assert keys[:17] == [(name, value, "B-PERSON")
                         for name, value in zip(NER_FEATURE_NAMES, _features("Pierre"))]
    assert list(vocabulary.mapping.values()) == list(range(len(vocabulary)))
    assert vocabulary.labels == ["B-PERSON", "I-PERSON", "O"]


def test_labels_always_include_outside():
    vocab = FeatureVocabulary.build([TrainingExample(_features("IBM"), "B-ORG")])
    assert vocab.labels == ["B-ORG", "O"]


def test_cardinality_counts_feature_names(vocabulary):
    assert vocabulary.cardinality == len(NER_FEATURE_NAMES) + 1


def test_register_existing_key_does_not_grow(vocabulary):
    size = len(vocabulary)
    index = vocabulary.mapping[("word", "Pierre", "B-PERSON")]

    assert vocabulary.register("word", "Pierre", "B-PERSON") == index
    assert len(vocabulary) == size
    assert (index, 1) in vocabulary.encode(_features("Pierre"), "B-PERSON")
    assert len(vocabulary) == size


def test_encode_drops_unknown_keys(vocabulary):
    encoding = vocabulary.encode(_features("Unseen"), "B-PERSON")
    # Only the word slot is new; the other 16 slots match the Pierre example.
    assert len(encoding) == 16
    assert all(value == 1 for _, value in encoding)


def test_encode_gis_sums_to_cardinality(vocabulary):
    for word in ("Pierre", "Unseen"):
        for label in vocabulary.labels:
            encoding = vocabulary.encode_gis(_features(word), label)
            assert encoding[-1][0] == len(vocabulary)
            assert sum(value for _, value in encoding) == vocabulary.cardinality


# =============================================================================
# CLASSIFIER
# =============================================================================

def test_classify_picks_highest_score(vocabulary):
    weights = np.zeros(len(vocabulary) + 1)
    weights[vocabulary.mapping[("word", "Vinken", "I-PERSON")]] = 5.0
    classifier = MaxentClassifier(weights, vocabulary)
    assert classifier.classify(_features("Vinken")) == "I-PERSON"


def test_classify_ties_go_to_label_order(vocabulary):
    classifier = MaxentClassifier(np.zeros(len(vocabulary) + 1), vocabulary)
    assert classifier.classify(_features("Vinken")) == "B-PERSON"


def test_weight_length_is_checked(vocabulary):
    with pytest.raises(ValueError):
        MaxentClassifier(np.zeros(len(vocabulary)), vocabulary)


def test_prob_classify_sums_to_one(vocabulary):
    rng = np.random.default_rng(0)
    classifier = MaxentClassifier(rng.normal(size=len(vocabulary) + 1), vocabulary)
    for word in ("Pierre", "Vinken", "joined", "Unseen"):
        dist = classifier.prob_classify(_features(word))
        assert dist.samples() == vocabulary.labels
        assert sum(dist.prob(label) for label in vocabulary.labels) == pytest.approx(1.0)
        assert set(dist.encodings) == set(vocabulary.labels)
