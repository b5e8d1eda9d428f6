# In lexitag/feature_extractor.py

import re

from lexitag.lexicons import BASIC_WORDS

# --- 1. Configuration ---
POS_FEATURE_NAMES = (
    "bias", "i suffix", "i pref1", "i-1 tag", "i-2 tag", "i tag+i-2 tag",
    "i word", "i-1 tag+i word", "i-1 word", "i-1 suffix", "i-2 word",
    "i+1 word", "i+1 suffix", "i+2 word")

NER_FEATURE_NAMES = (
    "bias", "en-wordlist", "nextpos", "nextword", "pos", "pos+prevtag",
    "prefix3", "prevpos", "prevtag", "prevword", "shape", "shape+prevtag",
    "suffix3", "word", "word+nextpos", "word.lower", "wordlen")

START_PAD = ("-START-", "-START2-")
END_PAD = ("-END-", "-END2-")

# Value used for context that falls off either end of the sentence.
NONE_FEATURE = "None"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


# --- 2. POS features ---
def normalize(word):
    """Collapses hyphenated words, years and numbers into placeholder classes."""
    if not word:
        return word
    if "-" in word and word[0] != "-":
        return "!HYPHEN"
    if _INTEGER_RE.fullmatch(word) and len(word) == 4:
        return "!YEAR"
    if word[0] in "0123456789":
        return "!DIGITS"
    return word.lower()


def pos_context(words):
    """Normalizes a sentence and pads it with two sentinels on each side."""
    return list(START_PAD) + [normalize(w) for w in words] + list(END_PAD)


def pos_features(i, context, word, prev, prev2):
    """
    Builds the 14 perceptron features for the word at position `i`.
    `context` is the padded output of pos_context; `prev` and `prev2` are the
    two previously predicted tags.
    """
    i = min(len(context) - 2, i + 2)
    values = (
        (),
        (word[-3:],),
        (word[:1],),
        (prev,),
        (prev2,),
        (prev, prev2),
        (context[i],),
        (prev, context[i]),
        (context[i - 1],),
        (context[i - 1][-3:],),
        (context[i - 2],),
        (context[i + 1],),
        (context[i + 1][-3:],),
        (context[i + 2],),
    )
    return tuple(" ".join((name,) + value) for name, value in zip(POS_FEATURE_NAMES, values))


# --- 3. NER features ---
# ASCII decimal or exponent notation, plus inf/nan; no underscores or padding.
_NUMBER_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE)
_PUNCT_END_RE = re.compile(r"\W+$", re.ASCII)
_WORD_END_RE = re.compile(r"\w+$", re.ASCII)


def is_numeric(word):
    return _NUMBER_RE.fullmatch(word) is not None


def _title(word):
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), word)


def shape(word):
    """Orthographic class of a token."""
    if is_numeric(word):
        return "number"
    if _PUNCT_END_RE.search(word):
        return "punct"
    if _WORD_END_RE.search(word):
        if word.lower() == word:
            return "downcase"
        if _title(word) == word:
            return "upcase"
        return "mixedcase"
    return "other"


def simple_pos(tag):
    """Folds every verb tag into 'v' and drops any '-' qualifier."""
    if tag.startswith("V"):
        return "v"
    return tag.split("-")[0]


def is_basic(word):
    return "True" if word in BASIC_WORDS else "False"


def ner_features(i, tokens, history):
    """
    Builds the 17 entity features for tokens[i].

    `tokens` must already carry POS tags; `history` holds the NER labels
    emitted (or assigned, during training) for the tokens before `i`.
    """
    word = tokens[i].text
    lower = word.lower()

    if i == 0:
        prevword = prevpos = prevtag = prev_shape = NONE_FEATURE
    else:
        prevword = tokens[i - 1].text.lower()
        prevpos = tokens[i - 1].tag
        prevtag = history[i - 1]
        prev_shape = shape(tokens[i - 1].text)

    if i == len(tokens) - 1:
        nextword = nextpos = NONE_FEATURE
    else:
        nextword = tokens[i + 1].text.lower()
        nextpos = simple_pos(tokens[i + 1].tag).lower()

    return (
        "True",
        is_basic(lower),
        nextpos,
        nextword,
        tokens[i].tag,
        tokens[i].tag + "+" + prevtag,
        lower[:3],
        prevpos,
        prevtag,
        prevword,
        shape(word),
        prev_shape + "+" + prevtag,
        lower[-3:],
        word,
        lower + "+" + nextpos,
        lower,
        str(len(word)),
    )
