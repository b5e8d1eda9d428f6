# In predict.py (in the root lexitag folder)

import argparse
import sys

from lexitag.exceptions import LexitagError
from lexitag.logging_config import configure_logging
from lexitag.ner_model import Model
from lexitag.tokenizer import IterTokenizer

# --- 1. Sample text ---
SAMPLE_TEXT = (
    "Pierre Vinken, 61 years old, will join the board as a nonexecutive director Nov. 29. "
    "Mr. Vinken is chairman of Elsevier N.V., the Dutch publishing group."
)


def extract_entities(text, model, tokenizer):
    """Tokenizes, tags and chunks `text`; returns the tokens and the entities."""
    tokens = tokenizer.tokenize(text)
    entities = model.extract(tokens)
    return tokens, entities


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Tag text and extract named entities.")
    parser.add_argument("model", help="model directory written by lexitag.ner_model")
    parser.add_argument("--text", default=SAMPLE_TEXT)
    args = parser.parse_args()

    configure_logging()
    print("Loading model...")
    try:
        model = Model.from_disk(args.model)
    except LexitagError as e:
        print(f"Error: unable to load model: {e}")
        print("Please run 'python -m lexitag.ner_model' first to train and save a model.")
        sys.exit(1)

    tokens, entities = extract_entities(args.text, model, IterTokenizer())

    print("\n" + "=" * 50)
    print(f"Original Text:\n---\n{args.text}\n---")
    print("\n--- Tagged Tokens ---")
    print(" ".join(f"{t.text}/{t.tag}/{t.label}" for t in tokens))
    print("\n--- Detected Entities ---")
    for i, ent in enumerate(entities):
        print(f"[{i + 1}]: {ent.label}: {ent.text}")
    print("\n" + "=" * 50)
