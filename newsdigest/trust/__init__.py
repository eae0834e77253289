"""Trust classification for news text."""

from newsdigest.trust.classifier import classify_trust
from newsdigest.trust.lexicon import get_trust_lexicon, load_lexicon
from newsdigest.trust.models import TrustLexicon, TrustVerdict, parse_verdict

__all__ = [
    "TrustLexicon",
    "TrustVerdict",
    "classify_trust",
    "get_trust_lexicon",
    "load_lexicon",
    "parse_verdict",
]
