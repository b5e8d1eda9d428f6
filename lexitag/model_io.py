# In lexitag/model_io.py

import logging
from pathlib import Path

import joblib
import numpy as np

from lexitag.exceptions import AssetDecodeError, MissingAssetError
from lexitag.maxent_model import FeatureVocabulary, MaxentClassifier
from lexitag.perceptron_model import AveragedPerceptron, PerceptronTagger

logger = logging.getLogger(__name__)

# --- 1. Configuration ---
MAXENT_DIR = "Maxent"
TAGGER_DIR = "AveragedPerceptron"
ASSET_SUFFIX = ".joblib"


# --- 2. Helpers ---
def _load_asset(folder, name):
    path = Path(folder) / (name + ASSET_SUFFIX)
    if not path.is_file():
        raise MissingAssetError(f"missing model file: {path}")
    try:
        return joblib.load(path)
    except OSError as err:
        raise MissingAssetError(f"unable to read {path}: {err}") from err
    except Exception as err:
        raise AssetDecodeError(f"unable to decode {path}: {err}") from err


def _dump_asset(value, folder, name):
    joblib.dump(value, Path(folder) / (name + ASSET_SUFFIX))


def _is_str_list(value):
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _as_floats(value, folder, what):
    try:
        return np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as err:
        raise AssetDecodeError(f"{folder}: {what} must be numeric: {err}") from err


# --- 3. MaxEnt classifier ---
def save_classifier(classifier, path):
    folder = Path(path) / MAXENT_DIR
    folder.mkdir(parents=True, exist_ok=True)
    _dump_asset(list(classifier.labels), folder, "labels")
    _dump_asset(dict(classifier.vocabulary.mapping), folder, "mapping")
    _dump_asset(np.asarray(classifier.weights, dtype=np.float64), folder, "weights")
    logger.info("Saved MaxEnt classifier (%d weights) to %s", len(classifier.weights), folder)


def load_classifier(path):
    """Loads labels, joint-key mapping and weights; any missing or malformed file is fatal."""
    folder = Path(path) / MAXENT_DIR
    labels = _load_asset(folder, "labels")
    mapping = _load_asset(folder, "mapping")
    weights = _load_asset(folder, "weights")

    if not _is_str_list(labels) or not labels:
        raise AssetDecodeError(f"{folder}: labels must be a non-empty list of strings")
    if not isinstance(mapping, dict) or not all(
            isinstance(k, tuple) and len(k) == 3 and isinstance(v, int)
            for k, v in mapping.items()):
        raise AssetDecodeError(f"{folder}: mapping must map 3-tuples to integers")
    if set(mapping.values()) != set(range(len(mapping))):
        raise AssetDecodeError(f"{folder}: mapping indices must be exactly 0..{len(mapping) - 1}")
    weights = _as_floats(weights, folder, "weights")
    if weights.ndim != 1 or weights.shape[0] != len(mapping) + 1:
        raise AssetDecodeError(
            f"{folder}: expected {len(mapping) + 1} weights, got shape {weights.shape}")

    vocabulary = FeatureVocabulary(mapping, labels)
    logger.info("Loaded MaxEnt classifier from %s (%d labels)", folder, len(labels))
    return MaxentClassifier(weights, vocabulary)


# --- 4. POS tagger ---
def save_tagger(tagger, path):
    folder = Path(path) / TAGGER_DIR
    folder.mkdir(parents=True, exist_ok=True)
    model = tagger.model
    _dump_asset(list(model.classes), folder, "classes")
    _dump_asset(dict(model.tagdict), folder, "tags")
    _dump_asset({feat: np.asarray(row, dtype=np.float64) for feat, row in model.weights.items()},
                folder, "weights")
    logger.info("Saved POS tagger (%d features) to %s", len(model.weights), folder)


def load_tagger(path):
    folder = Path(path) / TAGGER_DIR
    classes = _load_asset(folder, "classes")
    tagdict = _load_asset(folder, "tags")
    weights = _load_asset(folder, "weights")

    if not _is_str_list(classes) or not classes:
        raise AssetDecodeError(f"{folder}: classes must be a non-empty list of strings")
    if not isinstance(tagdict, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in tagdict.items()):
        raise AssetDecodeError(f"{folder}: tags must map words to tag strings")
    if not isinstance(weights, dict):
        raise AssetDecodeError(f"{folder}: weights must be a dict")

    dense = {}
    for feat, row in weights.items():
        row = _as_floats(row, folder, f"weight row for {feat!r}")
        if row.shape != (len(classes),):
            raise AssetDecodeError(
                f"{folder}: weight row for {feat!r} has shape {row.shape}, "
                f"expected ({len(classes)},)")
        dense[feat] = row

    logger.info("Loaded POS tagger from %s (%d classes)", folder, len(classes))
    return PerceptronTagger(AveragedPerceptron(dense, tagdict, classes))
