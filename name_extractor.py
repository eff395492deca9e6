# name_extractor.py
import os
import re
from typing import List, Optional

from text_cleaner import split_lines

CAP_WORD = r"[A-Z][a-zA-Z'.]*"
# stops before the next "Email:"/"Phone:" style label on the same line
CAP_SEQUENCE = CAP_WORD + r"(?: (?!(?i:e-?mail|phone|mobile|contact|tel|address)\b)" + CAP_WORD + r")*"

LABELED_NAME_RE = re.compile(
    r'(?:^|[|,;]\s*)(?i:(?:full |candidate )?name)\s*:\s*(' + CAP_SEQUENCE + r')'
)
FULL_LINE_NAME_RE = re.compile(r'^([A-Z][a-z]+(?: [A-Z][a-z]+)+)$')
HEADER_RE = re.compile(r'\b(?i:curriculum vitae|resume|résumé)\b')
NAME_BEFORE_HEADER_RE = re.compile(
    r'^([A-Z][a-z]+(?: [A-Z][a-z]+)+)\s*[-|,:]?\s*(?i:curriculum vitae|resume|résumé)\b'
)
SHORT_NAME_LINE_RE = re.compile(r'^([A-Z][a-z]+(?: [A-Z][a-z]+){1,3})$')
CONTACT_TOKEN_RE = re.compile(r'@|\d{3}[-.\s]?\d{3}[-.\s]?\d{4}')

# Capitalized header lines that look like names but never are
HEADER_WORDS = {
    'curriculum', 'vitae', 'resume', 'résumé', 'cv', 'profile', 'summary',
    'contact', 'details', 'information', 'personal', 'objective', 'career',
    'professional', 'experience', 'education', 'skills', 'page',
}


def _is_header_words(candidate: str) -> bool:
    return all(w.lower().strip('.') in HEADER_WORDS for w in candidate.split())


def _accept(candidate: Optional[str]) -> Optional[str]:
    candidate = (candidate or '').strip()
    if not candidate or _is_header_words(candidate):
        return None
    return candidate


def _from_label(lines: List[str]) -> Optional[str]:
    for line in lines:
        m = LABELED_NAME_RE.search(line)
        if m and _accept(m.group(1)):
            return _accept(m.group(1))
    return None


def _from_first_line(lines: List[str]) -> Optional[str]:
    first = next((ln for ln in lines if ln), None)
    if first:
        m = FULL_LINE_NAME_RE.match(first)
        if m:
            return _accept(m.group(1))
    return None


def _near_header(lines: List[str]) -> Optional[str]:
    for i, line in enumerate(lines):
        if not HEADER_RE.search(line):
            continue
        m = NAME_BEFORE_HEADER_RE.match(line)
        if m and _accept(m.group(1)):
            return _accept(m.group(1))
        following = next((ln for ln in lines[i + 1:] if ln), '')
        m = FULL_LINE_NAME_RE.match(following)
        if m and _accept(m.group(1)):
            return _accept(m.group(1))
    return None


def _before_contact_line(lines: List[str]) -> Optional[str]:
    for line, next_line in zip(lines, lines[1:]):
        m = SHORT_NAME_LINE_RE.match(line)
        if m and CONTACT_TOKEN_RE.search(next_line) and _accept(m.group(1)):
            return _accept(m.group(1))
    return None


def extract_name(text: str) -> Optional[str]:
    """
    Guess the candidate's name from the resume text.

    Tried in order: a "Name:" label, a first line made only of capitalized
    words, the line next to a "Curriculum Vitae"/"Resume" header, and a short
    capitalized line directly above an email or phone line.
    """
    lines = split_lines(text)
    if not lines:
        return None
    for finder in (_from_label, _from_first_line, _near_header, _before_contact_line):
        name = finder(lines)
        if name:
            return name
    return None


def _title_case_words(value: str) -> str:
    value = re.sub(r'\s+', ' ', value).strip()
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), value)


def _strip_extension_and_separators(file_name: str) -> str:
    base = os.path.basename(file_name or '')
    base = re.sub(r'\.[^/.]+$', '', base)
    return re.sub(r'[_-]', ' ', base)


def name_from_filename(file_name: str) -> str:
    name = _strip_extension_and_separators(file_name)
    name = re.sub(r'^\s*(?:cv|resume)\b\s*', '', name, flags=re.IGNORECASE)
    return _title_case_words(name)


def title_from_filename(file_name: str) -> str:
    title = _strip_extension_and_separators(file_name)
    title = re.sub(r'^\s*(?:job description|jd|job)\b\s*', '', title, flags=re.IGNORECASE)
    return _title_case_words(title)


def clean_job_title(title: str) -> str:
    return re.sub(r'^JD\s*-\s*', '', (title or '').strip(), flags=re.IGNORECASE)
