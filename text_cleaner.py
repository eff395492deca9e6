import re
import unicodedata
from typing import List

ZERO_WIDTH_RE = re.compile(r'[\u00ad\u200b-\u200d\u2060\ufeff]')
# unicode dash family and minus sign, one for one
DASH_RE = re.compile(r'[\u2010-\u2015\u2212]')
HORIZONTAL_SPACE_RE = re.compile(r'[^\S\n]+')
EXCESS_NEWLINES_RE = re.compile(r'\n{3,}')


def normalize_lines(text: str) -> str:
    """
    Line-preserving cleanup used by every line-based scanner.

    Zero-width characters and soft hyphens are dropped, each dash variant
    becomes one ASCII hyphen, horizontal whitespace collapses to one space
    and blank-line runs are capped at one empty line. Idempotent.
    """
    if not text:
        return ""
    text = ZERO_WIDTH_RE.sub('', text)
    text = unicodedata.normalize("NFKC", text)
    text = DASH_RE.sub('-', text)
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = HORIZONTAL_SPACE_RE.sub(' ', text)
    text = "\n".join(ln.strip() for ln in text.split('\n'))
    text = EXCESS_NEWLINES_RE.sub('\n\n', text)
    return text.strip()


def normalize_text(text: str) -> str:
    """Single-line view: the line view with every whitespace run turned into one space."""
    return re.sub(r'\s+', ' ', normalize_lines(text)).strip()


def split_lines(text: str) -> List[str]:
    cleaned = normalize_lines(text)
    return cleaned.split('\n') if cleaned else []
