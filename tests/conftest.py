# -*- coding: utf-8 -*-
"""Shared fixtures: a small hand-weighted reference POS tagger and labeled records."""
import numpy as np
import pytest

from lexitag.perceptron_model import AveragedPerceptron, PerceptronTagger
from lexitag.process_data import EntityContext, LabeledEntity

# Normalized word -> tag, scored through the "i word" feature.
REFERENCE_WORDS = {
    "pierre": "NNP", "vinken": "NNP", "!DIGITS": "CD", "board": "NN", "director": "NN",
    "windows": "NNP", "is": "VBZ", "an": "DT", "operating": "NN", "system": "NN",
    "i": "PRP", "use": "VBP", "daily": "RB", "new": "JJ",
}

# The rest of "Pierre Vinken , 61 years old , ..." is only reachable through
# the other feature slots, so each of them has to arrive at the scorer.
REFERENCE_CONTEXT = {
    "i suffix ars": "NNS",                  # years
    "i-1 tag+i word NNS old": "JJ",         # old
    "i+1 suffix ITS": ",",                  # , before 61
    "i-1 word old": ",",                    # , after old
    "i+1 word join": "MD",                  # will
    "i-1 tag MD": "VB",                     # join
    "i+2 word nonexecutive": "IN",          # as
    "i pref1 n": "JJ",                      # nonexecutive
    "i tag+i-2 tag NN JJ": "NNP",           # Nov.
    "i-2 word nov.": ".",                   # .
}

# Memorized words bypass the scorer entirely.
REFERENCE_TAGDICT = {"the": "DT", "a": "DT", "The": "DT"}

REFERENCE_CLASSES = ["NNP", ",", "CD", "NNS", "JJ", "MD", "VB", "DT", "NN", "IN", ".",
                     "VBZ", "PRP", "VBP", "RB"]


def _one_hot(tag, value=1.0):
    row = np.zeros(len(REFERENCE_CLASSES))
    row[REFERENCE_CLASSES.index(tag)] = value
    return row


def build_reference_tagger():
    weights = {"bias": _one_hot("NNP", 0.5)}
    for word, tag in REFERENCE_WORDS.items():
        weights["i word " + word] = _one_hot(tag)
    for feature, tag in REFERENCE_CONTEXT.items():
        weights[feature] = _one_hot(tag)
    return PerceptronTagger(AveragedPerceptron(weights, dict(REFERENCE_TAGDICT), REFERENCE_CLASSES))


@pytest.fixture
def reference_tagger():
    return build_reference_tagger()


@pytest.fixture
def product_records():
    return [
        EntityContext("Windows 10 is an operating system", [LabeledEntity(0, 10, "PRODUCT")]),
        EntityContext("I use Windows 10 daily", [LabeledEntity(6, 16, "PRODUCT")]),
        EntityContext("Pierre Vinken is a director", [LabeledEntity(0, 13, "PERSON")]),
        EntityContext("The board is new", []),
    ]
