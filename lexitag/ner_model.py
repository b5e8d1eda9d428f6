# In lexitag/ner_model.py

import argparse
import json
import logging
from pathlib import Path

from lexitag.chunker import chunk
from lexitag.feature_extractor import ner_features
from lexitag.gis_trainer import GIS_ROUNDS, train_gis
from lexitag.model_io import load_classifier, load_tagger, save_classifier, save_tagger
from lexitag.process_data import assign_labels, make_corpus
from lexitag.tokenizer import IterTokenizer

logger = logging.getLogger(__name__)


# --- 1. Entity extraction ---
class EntityExtracter:
    """Labels tagged tokens with a MaxentClassifier and chunks them into entities."""

    def __init__(self, classifier):
        self.classifier = classifier

    def classify(self, tokens):
        """Writes an NER label into each token, left to right, and returns the tokens."""
        history = []
        for i, token in enumerate(tokens):
            label = self.classifier.classify(ner_features(i, tokens, history))
            token.label = label
            history.append(label)
        return tokens

    def chunk(self, tokens):
        return chunk(tokens)

    def extract(self, tokens):
        return self.chunk(self.classify(tokens))


def train_entity_extracter(records, tagger, tokenizer=None, rounds=GIS_ROUNDS, n_jobs=1):
    """
    Trains an EntityExtracter from EntityContext records.

    Records are tokenized with `tokenizer` (IterTokenizer by default) and
    POS-tagged with `tagger` before feature extraction.
    """
    tokenizer = tokenizer or IterTokenizer()
    corpus = make_corpus(records, tagger, tokenizer)
    return EntityExtracter(train_gis(corpus, rounds=rounds, n_jobs=n_jobs))


# --- 2. Model ---
class Model:
    """A named pair of POS tagger and entity extracter."""

    def __init__(self, name, tagger, extracter=None):
        self.name = name
        self.tagger = tagger
        self.extracter = extracter

    @classmethod
    def from_data(cls, name, records, tagger, tokenizer=None, rounds=GIS_ROUNDS, n_jobs=1):
        extracter = train_entity_extracter(records, tagger, tokenizer, rounds=rounds, n_jobs=n_jobs)
        return cls(name, tagger, extracter)

    @classmethod
    def from_disk(cls, path):
        path = Path(path)
        tagger = load_tagger(path)
        extracter = EntityExtracter(load_classifier(path))
        return cls(path.name, tagger, extracter)

    def write(self, path):
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        save_tagger(self.tagger, path)
        if self.extracter is not None:
            save_classifier(self.extracter.classifier, path)

    def tag(self, tokens):
        return self.tagger.tag(tokens)

    def extract(self, tokens):
        return self.extracter.extract(self.tag(tokens))


# --- 3. Main Execution Block ---
if __name__ == "__main__":
    from lexitag.evaluate import label_report, label_scores, tag_accuracy
    from lexitag.logging_config import configure_logging
    from lexitag.perceptron_model import read_tagged, train_tagger
    from lexitag.process_data import load_entity_records

    parser = argparse.ArgumentParser(description="Train the MaxEnt entity extracter with GIS.")
    parser.add_argument("--train", required=True, help="JSONL file of labeled records")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--tagger", help="model directory containing a trained POS tagger")
    group.add_argument("--tagged", help="word|TAG corpus used to train a POS tagger first")
    parser.add_argument("--test", help="optional JSONL file to evaluate on")
    parser.add_argument("--output", required=True, help="model directory to write")
    parser.add_argument("--rounds", type=int, default=GIS_ROUNDS)
    parser.add_argument("--n-jobs", type=int, default=1)
    args = parser.parse_args()

    configure_logging()

    if args.tagger:
        pos_tagger = load_tagger(args.tagger)
    else:
        with open(args.tagged, "r", encoding="utf-8") as f:
            pos_tagger = train_tagger(read_tagged(f.read()))

    print("--- Training entity extracter ---")
    model = Model.from_data(Path(args.output).name, load_entity_records(args.train), pos_tagger,
                            rounds=args.rounds, n_jobs=args.n_jobs)
    model.write(args.output)
    print(f"Model saved to {args.output}")

    if args.test:
        print("\n--- Evaluating entity extracter ---")
        tokenizer = IterTokenizer()
        y_true, y_pred = [], []
        for record in load_entity_records(args.test):
            tokens = model.tag(tokenizer.tokenize(record.text))
            y_true.append(assign_labels(tokens, record))
            y_pred.append([t.label for t in model.extracter.classify(tokens)])

        labels = [l for l in model.extracter.classifier.labels if l != "O"]
        print(label_report(y_true, y_pred, labels=labels))
        scores = label_scores(y_true, y_pred, labels)
        summary = {"token_accuracy": tag_accuracy(y_true, y_pred),
                   "labels": scores.to_dict(orient="index")}
        report_path = Path(args.output) / "performance_report.json"
        with open(report_path, "w") as f:
            json.dump(summary, f, indent=4, default=float)
        print(f"\nPerformance metrics saved to {report_path}")
