"""
Topic and market classification.

Both labels come from ordered (pattern, label) rule tables. The haystack is
the lowercase concatenation of the filename and the text; the first rule
whose pattern matches wins, otherwise the default label applies.

The same topic table classifies questions at query time, so a chunk and a
question about the same subject land on the same label.

Example:
    >>> classify("UAE_Image_Guide.pptx", "Hero images must be 1125x780.")
    (<Topic.IMAGES: 'images'>, <Market.AE: 'AE'>)
"""

import re
from dataclasses import dataclass
from typing import Generic, List, Pattern, Tuple, TypeVar

from qcbuddy.core.models import Market, Topic

L = TypeVar("L")


@dataclass(frozen=True)
class Rule(Generic[L]):
    """One classification rule."""

    pattern: Pattern[str]
    label: L

    def matches(self, haystack: str) -> bool:
        return self.pattern.search(haystack) is not None


def _rule(pattern: str, label: L) -> Rule[L]:
    return Rule(re.compile(pattern), label)


# Order matters: earlier rules take precedence.
TOPIC_RULES: List[Rule[Topic]] = [
    _rule(
        r"\bcompany\b|step[\s_-]*by[\s_-]*step|\bcr\b|trade\s*licen[cs]e|\btl\b"
        r"|\btrn\b|\bvat\b|\blicen[cs]e\b|\bregistration\b|\baddress\b",
        Topic.COMPANY,
    ),
    _rule(
        r"\btag(?:s|ging|ged)?\b|\bcuisines?\b|fast\s*food|only\s+on\s+careem"
        r"|new\s+restaurant|\bc\+|\bg[12]\b",
        Topic.TAGS,
    ),
    _rule(
        r"\bwriting\b|capitali[sz]|\bcustomi[sz]ation|\bdescriptions?\b"
        r"|\buppercase\b|\blowercase\b",
        Topic.WRITING,
    ),
    _rule(
        r"\bimages?\b|\bhero\b|1200|1125|780|\bdimensions?\b|\bsize\b"
        r"|\bpixels?\b|\bassets?\b",
        Topic.IMAGES,
    ),
    _rule(
        r"\bzones?\b|\bradius\b|\bdiscovery\b|delivery\s*area|\bcoverage\b"
        r"|\bplan\s*a\b",
        Topic.ZONES,
    ),
]

MARKET_RULES: List[Rule[Market]] = [
    _rule(
        r"\buae\b|\bdubai\b|abu\s*dhabi|\bsharjah\b|\bajman\b|\bemirates\b",
        Market.AE,
    ),
    _rule(r"\bjordan\b|\bamman\b|\birbid\b|\bzarqa\b|\bjo\b", Market.JO),
    _rule(r"\bksa\b|\bsaudi\b|\briyadh\b|\bjeddah\b|\bsa\b", Market.SA),
]


def _first_match(rules: List[Rule[L]], haystack: str, default: L) -> L:
    for rule in rules:
        if rule.matches(haystack):
            return rule.label
    return default


def _haystack(filename: str, text: str) -> str:
    # Underscores count as separators so "UAE_Guide.docx" still matches \buae\b
    return f"{filename}\n{text}".lower().replace("_", " ")


def detect_topic(filename: str, text: str = "") -> Topic:
    """Topic label for a filename/text pair (misc when nothing matches)."""
    return _first_match(TOPIC_RULES, _haystack(filename, text), Topic.MISC)


def detect_market(filename: str, text: str = "") -> Market:
    """Market label for a filename/text pair (ALL when nothing matches)."""
    return _first_match(MARKET_RULES, _haystack(filename, text), Market.ALL)


def classify(filename: str, text: str) -> Tuple[Topic, Market]:
    """Classify a section. Pure: same inputs always give the same labels."""
    haystack = _haystack(filename, text)
    return (
        _first_match(TOPIC_RULES, haystack, Topic.MISC),
        _first_match(MARKET_RULES, haystack, Market.ALL),
    )


def classify_query(question: str) -> Topic:
    """Topic of a free-text question, using the same rule table."""
    return detect_topic("", question)
