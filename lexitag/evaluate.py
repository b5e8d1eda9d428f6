# In lexitag/evaluate.py

import pandas as pd
from sklearn.metrics import accuracy_score, precision_recall_fscore_support
from sklearn_crfsuite.metrics import flat_classification_report


def _flatten(sequences):
    return [label for seq in sequences for label in seq]


def tag_accuracy(gold_sequences, predicted_sequences):
    """Token-level accuracy over lists of label (or tag) sequences."""
    return accuracy_score(_flatten(gold_sequences), _flatten(predicted_sequences))


def label_scores(gold_sequences, predicted_sequences, labels):
    """Per-label precision, recall, f1 and support as a DataFrame indexed by label."""
    p, r, f1, support = precision_recall_fscore_support(
        _flatten(gold_sequences), _flatten(predicted_sequences),
        labels=labels, average=None, zero_division=0)
    return pd.DataFrame(
        {"precision": p, "recall": r, "f1_score": f1, "support": support},
        index=pd.Index(labels, name="label"))


def label_report(gold_sequences, predicted_sequences, labels=None, digits=4):
    """Text report in the format of sklearn's classification_report."""
    return flat_classification_report(gold_sequences, predicted_sequences,
                                      labels=labels, digits=digits)
