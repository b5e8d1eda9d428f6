# In lexitag/perceptron_model.py

import argparse
import logging
import random
import re
from collections import Counter, defaultdict

import numpy as np
from tqdm import tqdm

from lexitag.feature_extractor import pos_context, pos_features
from lexitag.lexicons import EMOTICONS

logger = logging.getLogger(__name__)

# --- 1. Configuration ---
PERCEPTRON_ITERATIONS = 5
TAGDICT_MIN_COUNT = 20
TAGDICT_MIN_RATIO = 0.97
AVERAGE_DECIMALS = 3

# Treebank trace placeholders ("*", "*T*-1", "0", ...) and frozen tags ("-LRB-").
NONE_RE = re.compile(r"^(?:0|\*[\w?]\*|\*\-\d{1,3}|\*[A-Z]+\*\-\d{1,3}|\*)$")
KEEP_RE = re.compile(r"^\-[A-Z]{3}\-$")


# --- 2. Model ---
class AveragedPerceptron:
    """
    Multiclass linear model over string features.

    `weights` maps a feature string to a dense row with one weight per entry
    of `classes`; `tagdict` holds the memorized high-confidence word -> tag
    pairs.
    """

    def __init__(self, weights, tagdict, classes):
        self.weights = weights
        self.tagdict = tagdict
        self.classes = list(classes)

    def scores(self, features):
        totals = np.zeros(len(self.classes))
        for feat in features:
            row = self.weights.get(feat)
            if row is not None:
                totals += row
        return totals

    def predict(self, features):
        # np.argmax keeps the first maximum, so ties go to class order.
        return self.classes[int(np.argmax(self.scores(features)))]


class PerceptronTagger:
    """Greedy left-to-right POS tagger backed by an AveragedPerceptron."""

    def __init__(self, model):
        self.model = model

    @property
    def classes(self):
        return self.model.classes

    def tag_word(self, word, features):
        if word == "-":
            return "-"
        if word in EMOTICONS:
            return "SYM"
        if word.startswith("@"):
            return "NN"
        if NONE_RE.match(word):
            return "-NONE-"
        if KEEP_RE.match(word):
            return word
        if word in self.model.tagdict:
            return self.model.tagdict[word]
        return self.model.predict(features())

    def tag(self, tokens):
        """Writes a POS tag into each token, in place, and returns the tokens."""
        context = pos_context([t.text for t in tokens])
        prev, prev2 = "-START-", "-START2-"
        for i, token in enumerate(tokens):
            word = token.text
            tag = self.tag_word(word, lambda: pos_features(i, context, word, prev, prev2))
            token.tag = tag
            prev2 = prev
            prev = tag
        return tokens


# --- 3. Training ---
def read_tagged(text, sep="|"):
    """
    Parses pre-tagged text, one sentence per line, into (words, tags) pairs.

    >>> read_tagged("Pierre|NNP Vinken|NNP")
    [(['Pierre', 'Vinken'], ['NNP', 'NNP'])]
    """
    sentences = []
    for line in text.splitlines():
        if not line.strip():
            continue
        words, tags = [], []
        for item in line.split():
            word, _, tag = item.rpartition(sep)
            words.append(word)
            tags.append(tag)
        sentences.append((words, tags))
    return sentences


def make_tagdict(sentences, min_count=TAGDICT_MIN_COUNT, min_ratio=TAGDICT_MIN_RATIO):
    """Memorizes words that are frequent and almost always carry the same tag."""
    counts = defaultdict(Counter)
    for words, tags in sentences:
        for word, tag in zip(words, tags):
            counts[word][tag] += 1

    tagdict = {}
    for word, freqs in counts.items():
        tag, mode = freqs.most_common(1)[0]
        total = sum(freqs.values())
        if total >= min_count and mode / total >= min_ratio:
            tagdict[word] = tag
    return tagdict


class _PerceptronTrainer:
    """Sparse perceptron with lazy weight averaging."""

    def __init__(self, classes):
        self.classes = classes
        self.weights = defaultdict(dict)
        self._totals = defaultdict(float)
        self._stamps = defaultdict(int)
        self.instances = 0

    def predict(self, features):
        scores = dict.fromkeys(self.classes, 0.0)
        for feat in features:
            for cls, weight in self.weights.get(feat, {}).items():
                scores[cls] += weight
        best = self.classes[0]
        for cls in self.classes:
            if scores[cls] > scores[best]:
                best = cls
        return best

    def _update_feat(self, cls, feat, delta):
        key = (feat, cls)
        current = self.weights[feat].get(cls, 0.0)
        self._totals[key] += (self.instances - self._stamps[key]) * current
        self._stamps[key] = self.instances
        self.weights[feat][cls] = current + delta

    def update(self, truth, guess, features):
        self.instances += 1
        if truth == guess:
            return
        for feat in features:
            self._update_feat(truth, feat, 1.0)
            self._update_feat(guess, feat, -1.0)

    def average(self):
        """Returns the dense averaged weight table."""
        dense = {}
        for feat, weights in self.weights.items():
            row = np.zeros(len(self.classes))
            for cls, weight in weights.items():
                key = (feat, cls)
                total = self._totals[key] + (self.instances - self._stamps[key]) * weight
                row[self.classes.index(cls)] = round(total / self.instances, AVERAGE_DECIMALS)
            if row.any():
                dense[feat] = row
        return dense


def train_tagger(sentences, iterations=PERCEPTRON_ITERATIONS, seed=0):
    """Trains a PerceptronTagger on (words, tags) sentences."""
    sentences = list(sentences)
    tagdict = make_tagdict(sentences)
    classes = []
    for _, tags in sentences:
        for tag in tags:
            if tag not in classes:
                classes.append(tag)

    trainer = _PerceptronTrainer(classes)
    rng = random.Random(seed)
    logger.info("Training POS tagger on %d sentences (%d classes, %d memorized words)",
                len(sentences), len(classes), len(tagdict))

    for _ in tqdm(range(iterations), desc="Training POS tagger"):
        correct = total = 0
        for words, tags in sentences:
            context = pos_context(words)
            prev, prev2 = "-START-", "-START2-"
            for i, word in enumerate(words):
                guess = tagdict.get(word)
                if guess is None:
                    features = pos_features(i, context, word, prev, prev2)
                    guess = trainer.predict(features)
                    trainer.update(tags[i], guess, features)
                prev2 = prev
                prev = guess
                correct += guess == tags[i]
                total += 1
        logger.debug("Perceptron iteration accuracy: %.4f", correct / max(total, 1))
        rng.shuffle(sentences)

    weights = trainer.average() if trainer.instances else {}
    return PerceptronTagger(AveragedPerceptron(weights, tagdict, classes))


# --- 4. Main Execution Block ---
if __name__ == "__main__":
    from lexitag.logging_config import configure_logging
    from lexitag.model_io import save_tagger

    parser = argparse.ArgumentParser(description="Train the averaged perceptron POS tagger.")
    parser.add_argument("--tagged", required=True, help="word|TAG corpus, one sentence per line")
    parser.add_argument("--output", required=True, help="model directory to write")
    parser.add_argument("--iterations", type=int, default=PERCEPTRON_ITERATIONS)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    configure_logging()
    with open(args.tagged, "r", encoding="utf-8") as f:
        corpus = read_tagged(f.read())
    tagger = train_tagger(corpus, iterations=args.iterations, seed=args.seed)
    save_tagger(tagger, args.output)
    print(f"POS tagger saved to {args.output} ({len(tagger.classes)} classes)")
