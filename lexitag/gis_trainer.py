# In lexitag/gis_trainer.py
"""
Generalized Iterative Scaling for MaxentClassifier.

Each round moves every weight by (log2 empirical - log2 estimated) / C,
where C is the vocabulary cardinality. There is no learning rate and no
convergence test: training always runs exactly `rounds` rounds.
"""

import logging

import numpy as np
from joblib import Parallel, delayed
from tqdm import tqdm

from lexitag.exceptions import TrainingDataError
from lexitag.maxent_model import FeatureVocabulary, MaxentClassifier

logger = logging.getLogger(__name__)

# --- 1. Configuration ---
GIS_ROUNDS = 100


# --- 2. Feature counts ---
def empirical_count(examples, vocabulary):
    """Counts how often each joint feature fires with each example's true label."""
    count = np.zeros(len(vocabulary) + 1)
    for example in examples:
        for index, value in vocabulary.encode_gis(example.features, example.label):
            count[index] += value
    return count


def _estimate_chunk(classifier, examples):
    count = np.zeros(len(classifier.vocabulary) + 1)
    for example in examples:
        pdist = classifier.prob_classify(example.features)
        for label in classifier.labels:
            prob = pdist.prob(label)
            for index, value in pdist.encodings[label]:
                count[index] += prob * value
    return count


def _chunks(examples, n_chunks):
    size = -(-len(examples) // n_chunks)
    return [examples[i:i + size] for i in range(0, len(examples), size)]


def estimated_count(classifier, examples, n_jobs=1, parallel=None):
    """
    Expected joint-feature counts under the current weights.

    With more than one job the examples are split into contiguous chunks and
    the partial counts are summed back in chunk order.
    """
    if n_jobs == 1 or len(examples) < 2:
        return _estimate_chunk(classifier, examples)

    n_chunks = min(len(examples), n_jobs if n_jobs > 0 else 8)
    parallel = parallel or Parallel(n_jobs=n_jobs)
    partials = parallel(delayed(_estimate_chunk)(classifier, chunk)
                        for chunk in _chunks(examples, n_chunks))
    count = np.zeros(len(classifier.vocabulary) + 1)
    for partial in partials:
        count += partial
    return count


# --- 3. Training loop ---
def train_gis(examples, rounds=GIS_ROUNDS, n_jobs=1, vocabulary=None, on_round=None):
    """
    Fits a MaxentClassifier to `examples` (TrainingExample tuples).

    `on_round(round_index, weights)` is called after every round with the
    live weight vector.
    """
    examples = list(examples)
    if not examples:
        raise TrainingDataError("cannot train a classifier on an empty corpus")

    if vocabulary is None:
        vocabulary = FeatureVocabulary.build(examples)
    cardinality = vocabulary.cardinality
    logger.info("GIS: %d examples, %d joint features, %d labels, cardinality %d",
                len(examples), len(vocabulary), len(vocabulary.labels), cardinality)

    empirical = empirical_count(examples, vocabulary)
    unattested = empirical == 0.0
    with np.errstate(divide="ignore"):
        log_empirical = np.log2(empirical)

    # log2(0) is -inf, which pins every unattested weight for good.
    classifier = MaxentClassifier(log_empirical.copy(), vocabulary)

    parallel = Parallel(n_jobs=n_jobs) if n_jobs != 1 else None
    for round_index in tqdm(range(rounds), desc="Training MaxEnt (GIS)"):
        estimated = estimated_count(classifier, examples, n_jobs=n_jobs, parallel=parallel)
        estimated[unattested] += 1
        with np.errstate(divide="ignore"):
            log_estimated = np.log2(estimated)
        # Assigning a new array keeps readers from seeing a half-updated round.
        classifier.weights = classifier.weights + (log_empirical - log_estimated) / cardinality
        logger.debug("GIS round %d: max |delta| %.6f", round_index + 1,
                     float(np.max(np.abs((log_empirical - log_estimated)[~unattested]), initial=0.0)))
        if on_round is not None:
            on_round(round_index, classifier.weights)

    return classifier
