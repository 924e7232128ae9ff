"""Normalizer: tokenizing, number words, and dosage/clock masking.

Every extractor works on the same token list so that a match can be traced
back to the token indices it consumed. Each token keeps three renderings:

    word    lowercased, edge punctuation stripped   "sieben", "800", "mg"
    value   number words replaced by digits          "7", "800", "mg"
    masked  value with dosages/clock times hidden    "7", "[dose]", "mg"

Only whole words are converted, and articles like "ein"/"eine" are left
alone since "eine Tablette" and negations ("keine") carry meaning of their
own.
"""

import re
from dataclasses import dataclass

_EDGE_PUNCT = ".,;:!?\"'()[]{}„“”«»‚‘’-–—…*"

_NUMBER_WORDS = {
    "null": "0", "eins": "1", "zwei": "2", "zwo": "2", "drei": "3",
    "vier": "4", "fünf": "5", "fuenf": "5", "sechs": "6", "sieben": "7",
    "acht": "8", "neun": "9", "zehn": "10", "elf": "11", "zwölf": "12",
    "zwoelf": "12", "dreizehn": "13", "vierzehn": "14", "fünfzehn": "15",
    "fuenfzehn": "15", "sechzehn": "16", "siebzehn": "17", "achtzehn": "18",
    "neunzehn": "19", "zwanzig": "20", "dreißig": "30", "dreissig": "30",
    "vierzig": "40", "fünfundvierzig": "45", "fünfzig": "50",
    "fuenfzig": "50", "sechzig": "60", "neunzig": "90",
}

DOSE_UNITS = {
    "mg", "milligramm", "mcg", "µg", "ug", "mikrogramm", "g", "gramm", "ml",
}

DOSE_MASK = "[dose]"
TIME_MASK = "[time]"

_NUMBER_RE = re.compile(r"^\d+(?:[.,]\d+)?$")
_CLOCK_RE = re.compile(r"^(\d{1,2})[:.](\d{2})$")
_GLUED_DOSE_RE = re.compile(r"^\d+(?:[.,]\d+)?(?:mg|mcg|µg|ug|ml|g)$")

_UMLAUTS = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})


def fold(text):
    """Lowercase and spell umlauts/ß in ASCII ("Stärke" -> "staerke")."""
    return text.lower().translate(_UMLAUTS)


def fold_word(text):
    """fold() and drop everything but letters and digits."""
    return re.sub(r"[^a-z0-9]", "", fold(text))


def is_number(s):
    return bool(_NUMBER_RE.match(s))


@dataclass(frozen=True)
class Token:
    raw: str
    word: str
    value: str
    masked: str


def _mask(value, next_word):
    m = _CLOCK_RE.match(value)
    if m and int(m.group(1)) <= 23 and int(m.group(2)) <= 59:
        return TIME_MASK
    if _GLUED_DOSE_RE.match(value):
        return DOSE_MASK
    if _NUMBER_RE.match(value) and next_word in DOSE_UNITS:
        return DOSE_MASK
    return value


def tokenize(text):
    """Split an utterance into Tokens. Punctuation-only tokens are dropped."""
    pairs = []
    for raw in (text or "").split():
        word = raw.lower().strip(_EDGE_PUNCT)
        if word:
            pairs.append((raw, word))

    tokens = []
    for i, (raw, word) in enumerate(pairs):
        value = _NUMBER_WORDS.get(word, word)
        next_word = pairs[i + 1][1] if i + 1 < len(pairs) else ""
        tokens.append(Token(raw, word, value, _mask(value, next_word)))
    return tokens


def normalize(text):
    """Lowercased, number-converted, masked rendering of an utterance.

    >>> normalize("Schmerzstärke sieben, Ibuprofen 800 mg um 14:30")
    'schmerzstärke 7 ibuprofen [dose] mg um [time]'
    """
    return " ".join(t.masked for t in tokenize(text))


class TokenView:
    """A space-joined rendering of tokens that maps regex spans back to tokens.

    Regexes are written against whole phrases ("vor 10 minuten"), but the
    notes cleaner removes by token index, so each view remembers where
    every token starts.
    """

    def __init__(self, words):
        self.words = list(words)
        self.text = " ".join(self.words)
        self._starts = []
        pos = 0
        for w in self.words:
            self._starts.append(pos)
            pos += len(w) + 1

    @classmethod
    def plain(cls, tokens):
        return cls(t.value for t in tokens)

    @classmethod
    def masked(cls, tokens):
        return cls(t.masked for t in tokens)

    def token_span(self, start, end):
        """Indices of the tokens overlapping the character range [start, end)."""
        return tuple(i for i, s in enumerate(self._starts)
                     if s < end and s + len(self.words[i]) > start)

    def match_span(self, m, group=0):
        return self.token_span(m.start(group), m.end(group))


if __name__ == "__main__":
    for t in ["Schmerzstärke sieben, Ibuprofen 800 mg um 14:30",
              "Vor zehn Minuten 400mg genommen",
              "halb drei nachmittags"]:
        print(f"  {t!r:55s} => {normalize(t)!r}")
