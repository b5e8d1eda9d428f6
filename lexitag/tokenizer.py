# In lexitag/tokenizer.py

import re
from dataclasses import dataclass
from typing import List, Protocol

from lexitag.lexicons import EMOTICONS

# --- 1. Configuration ---
# Abbreviations such as "U.S." or "Nov." are never split.
SPECIAL_RE = re.compile(r"^(?:[A-Za-z]\.){2,}$|^[A-Z][a-z]{1,2}\.$")
SANITIZE_MAP = [
    ("“", '"'),
    ("”", '"'),
    ("‘", "'"),
    ("’", "'"),
    ("&rsquo;", "'"),
]
CONTRACTIONS = ["'ll", "'s", "'re", "'m", "n't"]
SUFFIXES = [",", ")", '"', "]", "!", ";", ".", "?", ":", "'"]
PREFIXES = ["$", "(", '"', "["]


@dataclass
class Token:
    """A single word; `tag` and `label` are filled in by the tagger and the NER stage."""
    text: str
    tag: str = ""
    label: str = ""


class Tokenizer(Protocol):
    def tokenize(self, text: str) -> List[Token]:
        ...


def _never_unsplittable(token):
    return False


def has_any_prefix(token, prefixes):
    return any(len(token) > len(p) and token.startswith(p) for p in prefixes)


def has_any_suffix(token, suffixes):
    return any(len(token) > len(s) and token.endswith(s) for s in suffixes)


def has_any_index(token, needles):
    """Returns the position of the first needle found inside a longer token, else -1."""
    for needle in needles:
        idx = token.find(needle)
        if idx >= 0 and len(token) > len(needle):
            return idx
    return -1


class IterTokenizer:
    """
    Splits text on whitespace, then peels prefixes, contractions and trailing
    punctuation off each span until only words remain.
    """

    def __init__(self, special_re=SPECIAL_RE, sanitize_map=None, contractions=None,
                 split_cases=None, suffixes=None, prefixes=None, emoticons=None,
                 is_unsplittable=None):
        self.special_re = special_re
        self.sanitize_map = sanitize_map if sanitize_map is not None else SANITIZE_MAP
        self.contractions = contractions if contractions is not None else CONTRACTIONS
        self.suffixes = suffixes if suffixes is not None else SUFFIXES
        self.prefixes = prefixes if prefixes is not None else PREFIXES
        self.emoticons = emoticons if emoticons is not None else EMOTICONS
        self.is_unsplittable = is_unsplittable or _never_unsplittable
        self.split_cases = list(split_cases or []) + list(self.contractions)

    def sanitize(self, text):
        for old, new in self.sanitize_map:
            text = text.replace(old, new)
        return text

    def is_special(self, token):
        return (token in self.emoticons
                or self.special_re.match(token) is not None
                or self.is_unsplittable(token))

    def split(self, token):
        """Splits one whitespace-delimited span into word strings."""
        words = []
        trailing = []
        last = 0
        while token and len(token) != last:
            if self.is_special(token):
                words.append(token)
                break
            last = len(token)
            idx = has_any_index(token.lower(), self.split_cases)
            if has_any_prefix(token, self.prefixes):
                # $100 -> [$, 100]
                words.append(token[0])
                token = token[1:]
            elif idx > 0:
                # they'll -> [they, 'll], don't -> [do, n't]
                words.append(token[:idx])
                token = token[idx:]
            elif has_any_suffix(token, self.suffixes):
                # Well) -> [Well, )]
                trailing.insert(0, token[-1])
                token = token[:-1]
            else:
                words.append(token)
        return [w for w in words + trailing if w.strip()]

    def tokenize(self, text):
        tokens = []
        cache = {}
        for match in re.finditer(r"\S+", self.sanitize(text)):
            span = match.group(0)
            if span not in cache:
                cache[span] = self.split(span)
            tokens.extend(Token(text=word) for word in cache[span])
        return tokens
