# -*- coding: utf-8 -*-
"""
Tests

Tests cover:
    - Empirical counts and unattested weights pinned at -inf across rounds
    - Exact round count, determinism and parallel/sequential agreement
    - Fitting a small separable corpus
"""
import math

import numpy as np
import pytest

from lexitag.exceptions import TrainingDataError
from lexitag.feature_extractor import NER_FEATURE_NAMES
from lexitag.gis_trainer import empirical_count, estimated_count, train_gis
from lexitag.maxent_model import FeatureVocabulary, MaxentClassifier, TrainingExample


def _features(word, pos):
    values = dict.fromkeys(NER_FEATURE_NAMES, "None")
    values.update({"bias": "True", "word": word, "word.lower": word.lower(), "pos": pos})
    return tuple(values[name] for name in NER_FEATURE_NAMES)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def corpus():
    return [
        TrainingExample(_features("Paris", "NNP"), "B-GPE"),
        TrainingExample(_features("is", "VBZ"), "O"),
        TrainingExample(_features("big", "JJ"), "O"),
        TrainingExample(_features("London", "NNP"), "B-GPE"),
        TrainingExample(_features("rains", "VBZ"), "O"),
    ]


# =============================================================================
# COUNTS
# =============================================================================

def test_empirical_count(corpus):
    vocab = FeatureVocabulary.build(corpus)
    count = empirical_count(corpus, vocab)

    assert count.shape == (len(vocab) + 1,)
    assert count[vocab.mapping[("bias", "True", "O")]] == 3
    assert count[vocab.mapping[("pos", "NNP", "B-GPE")]] == 2
    # Every true label fires all 17 slots, so each example adds a correction of 1.
    assert count[-1] == len(corpus)


def test_estimated_count_matches_probability_mass(corpus):
    vocab = FeatureVocabulary.build(corpus)
    classifier = MaxentClassifier(np.zeros(len(vocab) + 1), vocab)
    est = estimated_count(classifier, corpus)
    # Each example spreads cardinality units of feature mass over its labels.
    assert est.sum() == pytest.approx(len(corpus) * vocab.cardinality)


# =============================================================================
# TRAINING
# =============================================================================

def test_unattested_weights_stay_negative_infinity(corpus):
    vocab = FeatureVocabulary.build(corpus)
    unattested = vocab.register("word", "Berlin", "B-GPE")
    seen_rounds = []

    def check(round_index, weights):
        seen_rounds.append(round_index)
        assert weights[unattested] == -math.inf
        assert np.isfinite(np.delete(weights, unattested)).all()

    classifier = train_gis(corpus, rounds=5, vocabulary=vocab, on_round=check)

    assert seen_rounds == [0, 1, 2, 3, 4]
    assert classifier.weights[unattested] == -math.inf


def test_training_is_bit_identical_across_runs(corpus):
    first = train_gis(corpus, rounds=10)
    second = train_gis(corpus, rounds=10)
    assert first.weights.tobytes() == second.weights.tobytes()
    assert first.vocabulary.mapping == second.vocabulary.mapping


def test_parallel_matches_sequential(corpus):
    sequential = train_gis(corpus, rounds=3, n_jobs=1)
    parallel = train_gis(corpus, rounds=3, n_jobs=2)
    np.testing.assert_allclose(parallel.weights, sequential.weights, rtol=1e-12, atol=1e-12)


def test_trained_classifier_fits_corpus(corpus):
    classifier = train_gis(corpus)
    for example in corpus:
        assert classifier.classify(example.features) == example.label
        dist = classifier.prob_classify(example.features)
        assert dist.max() == example.label


def test_empty_corpus_is_rejected():
    with pytest.raises(TrainingDataError):
        train_gis([])
