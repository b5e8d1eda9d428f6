# In lexitag/chunker.py

from dataclasses import dataclass

OUTSIDE = "O"
CARDINAL_TAG = "CD"
PERSON_BEGIN = "B-PERSON"


@dataclass
class Entity:
    label: str
    text: str


def continuation_label(label):
    """B-X -> I-X; any other label is its own continuation."""
    if label.startswith("B-"):
        return "I-" + label[2:]
    return label


def parse_entities(labels):
    """Resolves the category of a span from the raw labels of its tokens."""
    if len(labels) == 2 and PERSON_BEGIN in labels:
        # PERSON takes precedence because it's hard to identify.
        return "PERSON"
    _, _, category = labels[0].partition("-")
    return category or labels[0]


def coalesce(parts):
    return Entity(
        label=parse_entities([tok.label for tok in parts]),
        text=" ".join(tok.text for tok in parts),
    )


def chunk(tokens):
    """
    Greedily groups labeled, tagged tokens into entities.

    A token opens or extends the current entity when it carries a new non-O
    label, when it shares the POS tag of the previous token in the entity,
    or when it is a cardinal number following a labeled token. An O label
    or the expected continuation label closes the entity.
    """
    entities = []
    end = ""
    parts = []

    for tok in tokens:
        label = tok.label
        if ((label != OUTSIDE and label != end)
                or (parts and tok.tag == parts[-1].tag)
                or (parts and tok.tag == CARDINAL_TAG and parts[-1].label != OUTSIDE)):
            end = continuation_label(label)
            parts.append(tok)
        elif end and (label == OUTSIDE or label == end):
            if label != OUTSIDE:
                parts.append(tok)
            entities.append(coalesce(parts))
            end = ""
            parts = []

    if parts:
        entities.append(coalesce(parts))
    return entities
