import re
import logging
from collections import namedtuple
from typing import List, Optional
from datetime import date, datetime
from dateutil import parser as date_parser
from nltk.tokenize import RegexpTokenizer

from contact_extractor import extract_contact_info
from models import ParsedJobRequirement, ParsedResume, WorkPeriod
from name_extractor import extract_name
from skill_extractor import extract_skills
from text_cleaner import normalize_lines, split_lines

logger = logging.getLogger(__name__)

# Periods separated by at most this many days count as one stint
MERGE_GAP_DAYS = 30

DEGREE_SYNONYMS = {
    "btech": ["btech", "b.tech", "b.e.", "bachelor of technology", "bachelor of engineering"],
    "bsc": ["bsc", "b.sc", "bachelor of science"],
    "bca": ["bca", "b.c.a", "bachelor of computer applications"],
    "bba": ["bba", "b.b.a", "bachelor of business administration"],
    "ba": ["b.a.", "bachelor of arts"],
    "mba": ["mba", "m.b.a", "master of business administration"],
    "mtech": ["mtech", "m.tech", "master of technology", "master of engineering"],
    "msc": ["msc", "m.sc", "master of science"],
    "mca": ["mca", "m.c.a", "master of computer applications"],
    "phd": ["phd", "ph.d", "doctor of philosophy"],
    "bachelor": ["bachelor", "bachelors", "bachelor's"],
    "master": ["master", "masters", "master's"],
    "diploma": ["diploma"],
}


def _variant_pattern(variant: str) -> str:
    escaped = r'\s+'.join(re.escape(word) for word in variant.split())  # allow flexible spaces
    return r'(?<!\w)' + escaped + r'(?!\w)'


def _contains_variant(text: str, variants: List[str]) -> bool:
    for v in variants:
        pattern = _variant_pattern(v)
        if re.search(pattern, text, flags=re.IGNORECASE):
            return True
    return False


def _find_degree_in_text(text: str) -> Optional[str]:
    for norm, variants in DEGREE_SYNONYMS.items():
        if _contains_variant(text, variants):
            return norm
    return None


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (round() would bank it)."""
    return int(value + 0.5)


# --- Experience estimation ---

_YEARS = r'\+?\s*(?:years?|yrs?)\b'
EXPLICIT_EXPERIENCE_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r'\b(?:total|overall)\s+(?:work\s+|professional\s+|it\s+)?experience\b[^\n\d]{0,20}?\b(\d{1,2})' + _YEARS,
    r'\b(\d{1,2})' + _YEARS + r'\s+(?:of\s+)?(?:total|overall)\s+(?:work\s+|professional\s+)?experience',
    r'\b(?:professional|work(?:ing)?)\s+experience\s*(?:of|:|-)?\s*(\d{1,2})' + _YEARS,
    r'\bexperience\s*(?:of|:|-)?\s*(\d{1,2})' + _YEARS,
    r'\b(\d{1,2})' + _YEARS + r'\s+(?:of\s+)?(?:professional\s+|work\s+|industry\s+|relevant\s+)?experience',
    r'\b(\d{1,2})' + _YEARS + r'\s+in\s+(?:the\s+)?industry',
    r'\b(\d{1,2})' + _YEARS,
))

MONTH_NAME = (r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?'
              r'|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)')
RANGE_SEPARATOR = r'\s*(?:-+|to)\s*'
OPEN_END = r'(present|current|now)\b'

NUMERIC_RANGE_RE = re.compile(
    r'\b(\d{1,2})/(\d{4})' + RANGE_SEPARATOR + r'(?:(\d{1,2})/(\d{4})\b|' + OPEN_END + r')',
    re.IGNORECASE,
)
MONTH_RANGE_RE = re.compile(
    r'\b(' + MONTH_NAME + r')\.?\s+(\d{4})' + RANGE_SEPARATOR
    + r'(?:(' + MONTH_NAME + r')\.?\s+(\d{4})\b|' + OPEN_END + r')',
    re.IGNORECASE,
)
# a year preceded by "/" belongs to an MM/YYYY date
YEAR_RANGE_RE = re.compile(
    r'(?<![/\d])\b((?:19|20)\d{2})' + RANGE_SEPARATOR + r'(?:((?:19|20)\d{2})\b(?!/)|' + OPEN_END + r')',
    re.IGNORECASE,
)

DateRange = namedtuple('DateRange', 'kind start_year end_year period')


def _month_start(month: str, year: str) -> Optional[date]:
    try:
        return date_parser.parse(f"{month} {year}", default=datetime(1900, 1, 1)).date()
    except (ValueError, OverflowError):
        return None


def _numeric_start(month: str, year: str) -> Optional[date]:
    month_num = int(month)
    if not 1 <= month_num <= 12:
        return None
    return date(int(year), month_num, 1)


def _period_from_match(kind: str, m, today: date) -> Optional[WorkPeriod]:
    if kind == 'year':
        start = date(int(m.group(1)), 1, 1)
        end = today if m.group(3) else date(int(m.group(2)), 12, 31)
    else:
        to_date = _numeric_start if kind == 'numeric' else _month_start
        start = to_date(m.group(1), m.group(2))
        end = today if m.group(5) else to_date(m.group(3), m.group(4))

    if start is None or end is None or start > end:
        return None
    return WorkPeriod(start, end)


def find_date_ranges(text: str, today: Optional[date] = None) -> List[DateRange]:
    """
    Every date range in the text, month-qualified forms first.

    A span already claimed by an earlier form is not matched again, so
    "Jan 2018 - Present" is one range and not also "2018 - Present".
    Ranges whose dates are invalid or reversed carry ``period=None``.
    """
    today = today or date.today()
    ranges = []
    taken = []
    for kind, pattern in (('numeric', NUMERIC_RANGE_RE), ('month', MONTH_RANGE_RE), ('year', YEAR_RANGE_RE)):
        for m in pattern.finditer(text):
            if any(m.start() < end and start < m.end() for start, end in taken):
                continue
            taken.append(m.span())
            start_year = int(m.group(1) if kind == 'year' else m.group(2))
            if kind == 'year':
                end_year = None if m.group(3) else int(m.group(2))
            else:
                end_year = None if m.group(5) else int(m.group(4))
            ranges.append((m.start(), DateRange(kind, start_year, end_year, _period_from_match(kind, m, today))))
    ranges.sort(key=lambda item: item[0])
    return [r for _, r in ranges]


def merge_work_periods(periods: List[WorkPeriod]) -> List[WorkPeriod]:
    """Sort by start and fuse periods that overlap or sit within MERGE_GAP_DAYS of each other."""
    if not periods:
        return []
    ordered = sorted(periods, key=lambda p: (p.start, p.end))
    merged = [WorkPeriod(ordered[0].start, ordered[0].end)]
    for period in ordered[1:]:
        current = merged[-1]
        if (period.start - current.end).days <= MERGE_GAP_DAYS:
            current.end = max(current.end, period.end)
        else:
            merged.append(WorkPeriod(period.start, period.end))
    return merged


def period_months(period: WorkPeriod) -> int:
    # inclusive: Jan..Dec of one year is 12 months
    return (period.end.year - period.start.year) * 12 + (period.end.month - period.start.month) + 1


def _explicit_years(text: str) -> Optional[str]:
    for pattern in EXPLICIT_EXPERIENCE_PATTERNS:
        m = pattern.search(text)
        if m:
            return str(int(m.group(1)))
    return None


def estimate_experience_years(text: str, today: Optional[date] = None) -> str:
    """
    Years of experience as an integer string, or "" when nothing supports a number.

    An explicit statement ("5+ years of experience") wins. Otherwise a lone
    bare-year range gives end - start. Otherwise every dated work period is
    merged and the inclusive months summed and rounded to years.
    """
    text = normalize_lines(text)
    if not text:
        return ""

    explicit = _explicit_years(text)
    if explicit is not None:
        return explicit

    today = today or date.today()
    ranges = find_date_ranges(text, today)

    if len(ranges) == 1 and ranges[0].kind == 'year':
        only = ranges[0]
        end_year = only.end_year if only.end_year is not None else today.year
        if end_year >= only.start_year:
            return str(end_year - only.start_year)

    periods = [r.period for r in ranges if r.period is not None]
    if not periods:
        return ""
    total_months = sum(period_months(p) for p in merge_work_periods(periods))
    return str(round_half_up(total_months / 12))


REQUIRED_EXPERIENCE_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r'\b(?:minimum|min\.?|at\s+least|required)\s+(?:of\s+)?(?:experience\s*(?:of|:)?\s*)?(\d{1,2})' + _YEARS,
    r'\bexperience\s*(?:required|needed)?\s*:\s*(\d{1,2})',
    r'\b(\d{1,2})\s*(?:\+|-\s*\d{1,2}|to\s+\d{1,2})?\s*(?:years?|yrs?)\b',
))


def extract_required_experience(text: str) -> str:
    """Minimum years a job description asks for; "3-5 years" reads as 3."""
    text = normalize_lines(text)
    for pattern in REQUIRED_EXPERIENCE_PATTERNS:
        m = pattern.search(text)
        if m:
            return str(int(m.group(1)))
    return estimate_experience_years(text)


# --- Sections ---

SECTION_HEADING_RE = re.compile(
    r'^(?:(?:work\s+|professional\s+)?experience|employment(?:\s+history)?|work\s+history|projects?'
    r'|(?:technical\s+|key\s+|required\s+|preferred\s+)?skills|certifications?|achievements|awards'
    r'|summary|(?:career\s+)?objective|profile|interests|hobbies|languages|references|personal\s+details'
    r'|(?:key\s+)?responsibilities|duties|requirements|qualifications?|education(?:al)?(?:\s+\w+)?'
    r'|academics?(?:\s+\w+)?|what\s+you\'?ll\s+do|about\s+(?:us|the\s+role)|benefits|perks)'
    r'\s*(?::.*)?$',
    re.IGNORECASE,
)
EDUCATION_HEADING_RE = re.compile(
    r'^(?:education(?:al)?(?:\s+(?:background|qualifications?|details))?'
    r'|academic(?:s|\s+(?:background|qualifications?|details))?|qualifications?)\s*(?::\s*(.*))?$',
    re.IGNORECASE,
)
RESPONSIBILITY_HEADING_RE = re.compile(
    r'^(?:(?:key\s+|job\s+|main\s+)?(?:responsibilities|duties)|what\s+you\'?ll\s+do'
    r'|role\s+(?:overview|description)|job\s+description)\s*(?::\s*(.*))?$',
    re.IGNORECASE,
)
BULLET_PREFIX_RE = re.compile(r'^[\s\-*•·>]+')
_RESPONSIBILITY_TOKENIZER = RegexpTokenizer(r'[\n•]+', gaps=True)

# Responsibilities shorter than this are stray fragments
MIN_RESPONSIBILITY_LENGTH = 4


def extract_section(text: str, heading_re) -> List[str]:
    """
    Lines of the first section whose heading matches ``heading_re``.

    Text after a colon on the heading line is the first entry. The section
    ends at a blank line or at the next recognised heading.
    """
    lines = normalize_lines(text).split('\n')
    for i, line in enumerate(lines):
        m = heading_re.match(line)
        if not m:
            continue
        body = []
        if m.lastindex and m.group(m.lastindex):
            body.append(m.group(m.lastindex).strip())
        for following in lines[i + 1:]:
            if not following or SECTION_HEADING_RE.match(following):
                break
            body.append(following)
        if body:
            return body
    return []


def extract_education(text: str) -> str:
    section = extract_section(text, EDUCATION_HEADING_RE)
    if section:
        return ", ".join(BULLET_PREFIX_RE.sub('', ln) for ln in section if ln.strip('-*• '))

    for line in split_lines(text):
        if _find_degree_in_text(line) and not EDUCATION_HEADING_RE.match(line):
            return BULLET_PREFIX_RE.sub('', line)
    return ""


ROLE_WORDS = (r'(?:Developer|Engineer|Designer|Manager|Analyst|Specialist|Consultant|Architect|Lead'
              r'|Director|Officer|Administrator|Coordinator|Supervisor|Head|Scientist|Intern|Tester|Programmer)')
TITLE_LABEL_RE = re.compile(r'^(?:job\s+title|position(?:\s+title)?|role|designation|title)\s*:\s*(.+)$',
                            re.IGNORECASE | re.MULTILINE)
TITLE_LINE_RE = re.compile(r'^((?:[A-Z][\w/&+.#-]* ){0,5}' + ROLE_WORDS + r')$', re.MULTILINE)
TITLE_ANYWHERE_RE = re.compile(r'\b((?:[A-Z][a-zA-Z]+ ){1,4}' + ROLE_WORDS + r')\b')
HIRING_PHRASE_RE = re.compile(r'\b(?:hiring|looking\s+for|seeking)\s+(?:an?\s+)?((?:[A-Z][\w/&+.#-]* ){0,4}'
                              + ROLE_WORDS + r')\b')


def extract_job_title(text: str) -> str:
    text = normalize_lines(text)
    for pattern in (TITLE_LABEL_RE, TITLE_LINE_RE, HIRING_PHRASE_RE, TITLE_ANYWHERE_RE):
        m = pattern.search(text)
        if m:
            return m.group(1).strip(' .,-')
    return ""


def extract_responsibilities(text: str) -> List[str]:
    section = extract_section(text, RESPONSIBILITY_HEADING_RE)
    items = []
    for token in _RESPONSIBILITY_TOKENIZER.tokenize("\n".join(section)):
        item = BULLET_PREFIX_RE.sub('', token).strip()
        if len(item) >= MIN_RESPONSIBILITY_LENGTH and item not in items:
            items.append(item)
    return items


# --- Local records ---

def extract_resume_details(text: str, file_name: str = '') -> ParsedResume:
    contact = extract_contact_info(text)
    details = ParsedResume(
        name=extract_name(text) or '',
        email=contact.email,
        phone=contact.phone,
        skills=extract_skills(text),
        experience=estimate_experience_years(text),
        education=extract_education(text),
        file_name=file_name,
    )
    logger.debug("Local resume extraction for %s: %d skill(s), experience=%r",
                 file_name or '<text>', len(details.skills), details.experience)
    return details


def extract_job_details(text: str, file_name: str = '') -> ParsedJobRequirement:
    details = ParsedJobRequirement(
        title=extract_job_title(text),
        skills=extract_skills(text, is_requirement_doc=True),
        experience=extract_required_experience(text),
        responsibilities=extract_responsibilities(text),
        file_name=file_name,
    )
    logger.debug("Local job extraction for %s: %d skill(s), %d responsibility item(s)",
                 file_name or '<text>', len(details.skills), len(details.responsibilities))
    return details
