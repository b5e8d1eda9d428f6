# In lexitag/process_data.py

import logging
from dataclasses import dataclass, field
from typing import List

import pandas as pd
from tqdm import tqdm

from lexitag.exceptions import TrainingDataError
from lexitag.feature_extractor import ner_features
from lexitag.maxent_model import OUTSIDE_LABEL, TrainingExample

logger = logging.getLogger(__name__)


@dataclass
class LabeledEntity:
    """An externally labeled entity; offsets are character positions in the record text."""
    start: int
    end: int
    label: str


@dataclass
class EntityContext:
    """
    A sentence containing labeled entities.

    Annotation tools such as Prodigy keep entities their users rejected;
    a rejected record (accept=False) only contributes "O" labels.
    """
    text: str
    spans: List[LabeledEntity] = field(default_factory=list)
    accept: bool = True


def adjust_pos(text, start, end):
    """Maps character offsets onto the same text with all whitespace removed."""
    left = sum(1 for ch in text[:start] if ch.isspace())
    right = sum(1 for ch in text[:end] if ch.isspace())
    return start - left, end - right


def assign_labels(tokens, record):
    """
    Returns one BIO label per token for the record's spans.

    Offsets are compared in whitespace-free coordinates, so a span that
    starts or ends on whitespace still lands on the surrounding tokens.
    """
    history = [OUTSIDE_LABEL] * len(tokens)
    if not record.accept:
        return history

    for span in record.spans:
        start, end = adjust_pos(record.text, span.start, span.end)
        index = 0
        for i, tok in enumerate(tokens):
            if index == start:
                history[i] = "B-" + span.label
            elif start < index < end:
                history[i] = "I-" + span.label
            index += len(tok.text)
    return history


def extract_examples(tokens, history):
    """Builds one TrainingExample per token, using `history` as the previous labels."""
    return [TrainingExample(ner_features(i, tokens, history), history[i])
            for i in range(len(tokens))]


def make_corpus(records, tagger, tokenizer):
    """Tokenizes, POS-tags and labels every record, returning the flat example list."""
    corpus = []
    for record in tqdm(records, desc="Preparing NER corpus"):
        tokens = tagger.tag(tokenizer.tokenize(record.text))
        history = assign_labels(tokens, record)
        corpus.extend(extract_examples(tokens, history))
    logger.info("Built %d training examples from %d records", len(corpus), len(records))
    return corpus


def _span_from_dict(span, row):
    try:
        return LabeledEntity(int(span["start"]), int(span["end"]), str(span["label"]))
    except (KeyError, TypeError, ValueError) as err:
        raise TrainingDataError(f"malformed span {span!r} in record: {row!r}") from err


def _record_from_row(row):
    text = row.get("text")
    if not isinstance(text, str):
        raise TrainingDataError(f"training record without text: {row!r}")

    accept = True
    if isinstance(row.get("answer"), str):
        accept = row["answer"] == "accept"
    elif "accept" in row and not pd.isna(row["accept"]):
        accept = bool(row["accept"])

    spans = row.get("spans")
    if not isinstance(spans, list):
        spans = []
    return EntityContext(text=text, spans=[_span_from_dict(s, row) for s in spans], accept=accept)


def load_entity_records(file_path):
    """
    Reads a .jsonl file of {"text", "spans", "answer"|"accept"} records,
    as exported by Prodigy, into EntityContext objects.
    """
    # dtype=False keeps digit-only texts as strings
    df = pd.read_json(file_path, lines=True, dtype=False)
    if "text" not in df.columns:
        raise TrainingDataError(f"{file_path} has no 'text' column")
    records = [_record_from_row(row) for row in df.to_dict(orient="records")]
    logger.info("Loaded %d records from %s", len(records), file_path)
    return records
