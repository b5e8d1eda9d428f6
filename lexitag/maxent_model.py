# In lexitag/maxent_model.py
"""
Binary joint-feature maximum entropy classifier.

A joint feature fires only when an input feature (name, value) co-occurs with
a candidate label:

    joint_feat(fs, l) = 1 if fs[name] == value and l == label else 0

Scores are unnormalized log2 probabilities.
"""

import math
from collections import namedtuple

import numpy as np

from lexitag.feature_extractor import NER_FEATURE_NAMES

# --- 1. Configuration ---
# Two log2 values further apart than this are combined by keeping the larger.
MAX_LOG_DIFF = math.log2(1e-30)
OUTSIDE_LABEL = "O"

TrainingExample = namedtuple("TrainingExample", ["features", "label"])


# --- 2. Log-space arithmetic ---
def add_logs(x, y):
    """Returns log2(2**x + 2**y) without leaving log space."""
    if x < y + MAX_LOG_DIFF:
        return y
    if y < x + MAX_LOG_DIFF:
        return x
    base = min(x, y)
    if base == -math.inf:
        return base
    return base + math.log2(2 ** (x - base) + 2 ** (y - base))


def sum_logs(logs):
    """Folds add_logs over `logs` from left to right."""
    logs = list(logs)
    if not logs:
        return -math.inf
    total = logs[0]
    for value in logs[1:]:
        total = add_logs(total, value)
    return total


class ProbDist:
    """Log2 probability distribution over labels, in label order."""

    def __init__(self, logprobs, encodings=None, normalize=True):
        self.logprobs = dict(logprobs)
        self.encodings = encodings or {}
        if normalize and self.logprobs:
            total = sum_logs(self.logprobs.values())
            if total == -math.inf:
                # Nothing representable: fall back to a uniform distribution.
                uniform = math.log2(1.0 / len(self.logprobs))
                self.logprobs = dict.fromkeys(self.logprobs, uniform)
            else:
                self.logprobs = {label: p - total for label, p in self.logprobs.items()}

    def samples(self):
        return list(self.logprobs)

    def logprob(self, label):
        return self.logprobs.get(label, -math.inf)

    def prob(self, label):
        if label not in self.logprobs:
            return 0.0
        return 2 ** self.logprobs[label]

    def max(self):
        best = None
        for label, p in self.logprobs.items():
            if best is None or p > self.logprobs[best]:
                best = label
        return best


# --- 3. Vocabulary and encoding ---
class FeatureVocabulary:
    """
    Maps (feature name, feature value, label) joint keys to dense indices,
    assigned in first-seen order, and keeps the ordered label set.
    """

    def __init__(self, mapping=None, labels=None, feature_names=NER_FEATURE_NAMES):
        self.mapping = dict(mapping or {})
        self.labels = list(labels or [])
        self.feature_names = tuple(feature_names)

    @classmethod
    def build(cls, examples, feature_names=NER_FEATURE_NAMES):
        vocab = cls(feature_names=feature_names)
        for example in examples:
            vocab.add_label(example.label)
            for name, value in zip(vocab.feature_names, example.features):
                vocab.register(name, value, example.label)
        vocab.add_label(OUTSIDE_LABEL)
        return vocab

    def __len__(self):
        return len(self.mapping)

    def __contains__(self, key):
        return key in self.mapping

    def add_label(self, label):
        if label not in self.labels:
            self.labels.append(label)

    def register(self, name, value, label):
        """Returns the index of a joint key, assigning the next free one if it is new."""
        key = (name, value, label)
        index = self.mapping.get(key)
        if index is None:
            index = len(self.mapping)
            self.mapping[key] = index
        return index

    @property
    def cardinality(self):
        """Distinct feature names + 1; every GIS encoding sums to this value."""
        return len({key[0] for key in self.mapping}) + 1

    @property
    def correction_index(self):
        return len(self.mapping)

    def encode(self, features, label):
        """Returns (index, 1) for every joint key known to the vocabulary."""
        encoding = []
        for name, value in zip(self.feature_names, features):
            index = self.mapping.get((name, value, label))
            if index is not None:
                encoding.append((index, 1))
        return encoding

    def encode_gis(self, features, label):
        encoding = self.encode(features, label)
        fired = sum(value for _, value in encoding)
        encoding.append((self.correction_index, self.cardinality - fired))
        return encoding


# --- 4. Classifier ---
class MaxentClassifier:
    """Scores labels with a weight vector of length len(vocabulary) + 1."""

    def __init__(self, weights, vocabulary):
        weights = np.asarray(weights, dtype=np.float64)
        if weights.shape != (len(vocabulary) + 1,):
            raise ValueError(
                f"expected {len(vocabulary) + 1} weights, got shape {weights.shape}")
        self.weights = weights
        self.vocabulary = vocabulary

    @property
    def labels(self):
        return self.vocabulary.labels

    def _score(self, encoding):
        total = 0.0
        for index, value in encoding:
            total += self.weights[index] * value
        return float(total)

    def scores(self, features):
        return {label: self._score(self.vocabulary.encode(features, label))
                for label in self.labels}

    def classify(self, features):
        """Returns the highest-scoring label; ties go to the earlier label."""
        best_label, best_score = self.labels[0], -math.inf
        for label, score in self.scores(features).items():
            if score > best_score:
                best_label, best_score = label, score
        return best_label

    def prob_classify(self, features):
        """Returns the normalized distribution over labels under the GIS encoding."""
        logprobs, encodings = {}, {}
        for label in self.labels:
            encoding = self.vocabulary.encode_gis(features, label)
            encodings[label] = encoding
            logprobs[label] = self._score(encoding)
        return ProbDist(logprobs, encodings)
