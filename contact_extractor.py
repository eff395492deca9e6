# contact_extractor.py
import re
import logging
from typing import Dict, List

from models import ExtractedContact
from text_cleaner import normalize_text, split_lines

logger = logging.getLogger(__name__)

HEADER_LINE_COUNT = 30
# keyword line plus the two lines after it
PROXIMITY_WINDOW = 3

# --- Email ---

PLACEHOLDER_EMAIL_DOMAINS = (
    'example.com',
    'test.com',
    'email.com',
    'domain.com',
    'company.com',
    'yourcompany.com',
    'youremail.com',
    'sample.com',
)

EMAIL_RE = re.compile(r'\b[A-Za-z0-9][A-Za-z0-9._%-]*@[A-Za-z0-9][A-Za-z0-9.-]*\.[A-Za-z]{2,}\b')
LABELED_EMAIL_RE = re.compile(
    r'(?:e-mail|e\.?mail|mail|contact|id)[\s:]*'
    r'([A-Za-z0-9][A-Za-z0-9._%-]+@[A-Za-z0-9][A-Za-z0-9.-]+\.[A-Za-z]{2,})',
    re.IGNORECASE,
)
BRACKETED_EMAIL_RE = re.compile(
    r'[\[(]([A-Za-z0-9][A-Za-z0-9._%-]+@[A-Za-z0-9][A-Za-z0-9.-]+\.[A-Za-z]{2,})[\])]'
)
# OCR output often puts spaces around "@" and the last dot
SPACED_EMAIL_RE = re.compile(r'([A-Za-z0-9._%-]+)\s*@\s*([A-Za-z0-9.-]+)\s*\.\s*([A-Za-z]{2,})')
EMAIL_KEYWORD_RE = re.compile(r'\b(?:email|e-mail|mail|contact|reach|write)', re.IGNORECASE)
LOCAL_PART_RE = re.compile(r'^[A-Za-z0-9._%-]+$')


def is_valid_email(email: str) -> bool:
    if not email or len(email) < 5 or len(email) > 100:
        return False
    if email.count('@') != 1:
        return False
    if re.search(r'\s', email):
        return False

    local_part, domain = email.split('@')

    if not local_part or len(local_part) > 64:
        return False
    if local_part.startswith('.') or local_part.endswith('.') or '..' in local_part:
        return False
    if not LOCAL_PART_RE.match(local_part):
        return False

    if not domain or len(domain) > 255:
        return False
    if domain[0] in '.-' or domain[-1] in '.-':
        return False
    if '..' in domain or '.' not in domain:
        return False
    if len(domain.split('.')[-1]) < 2:
        return False

    # Short local part at a known fake domain is a template placeholder
    if domain.lower() in PLACEHOLDER_EMAIL_DOMAINS and len(local_part) < 3:
        return False
    return True


def _add_email(found: Dict[str, None], candidate: str) -> None:
    email = candidate.strip().lower()
    if is_valid_email(email):
        found.setdefault(email, None)


def extract_emails(text: str) -> List[str]:
    """
    Collect every plausible email address in the text.

    Strategies run in a fixed order and their hits are unioned, so the
    first element is the direct-regex hit when there is one.
    """
    found: Dict[str, None] = {}
    flat = normalize_text(text)
    lines = split_lines(text)

    for m in EMAIL_RE.finditer(flat):
        _add_email(found, m.group(0))

    for line in lines:
        for m in LABELED_EMAIL_RE.finditer(line):
            _add_email(found, m.group(1))

    for m in BRACKETED_EMAIL_RE.finditer(flat):
        _add_email(found, m.group(1))

    for m in SPACED_EMAIL_RE.finditer(flat):
        _add_email(found, f"{m.group(1)}@{m.group(2)}.{m.group(3)}")

    for i, line in enumerate(lines):
        if EMAIL_KEYWORD_RE.search(line):
            for nearby in lines[i:i + PROXIMITY_WINDOW]:
                for m in EMAIL_RE.finditer(nearby):
                    _add_email(found, m.group(0))

    for m in EMAIL_RE.finditer("\n".join(lines[:HEADER_LINE_COUNT])):
        _add_email(found, m.group(0))

    return list(found)


# --- Phone ---

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15

FAKE_PHONE_SEQUENCES = ('1234567890', '0123456789', '9876543210', '1111111111', '0000000000')

PHONE_LABELS = (
    'phone', 'mobile', 'cell', 'tel', 'telephone', 'contact',
    'ph', 'mob', 'number', 'call', 'reach',
)
PHONE_LABEL_RE = re.compile(r'\b(?:' + '|'.join(PHONE_LABELS) + r')\b', re.IGNORECASE)

# (pattern, north-american shape)
PHONE_PATTERNS = (
    # international with country code
    (re.compile(r'\+?\d{1,3}[\s.-]?\(?\d{2,4}\)?[\s.-]?\d{3,4}[\s.-]?\d{3,4}'), False),
    # India: +91 9876543210
    (re.compile(r'\+91[\s.-]?[6-9]\d{9}'), False),
    # India: 9876543210
    (re.compile(r'(?:^|[\s,;(])[6-9]\d{9}(?:[\s,;)]|$)'), False),
    # US: (123) 456-7890
    (re.compile(r'\(\d{3}\)[\s.-]?\d{3}[\s.-]?\d{4}'), True),
    # 123-456-7890 / 123.456.7890
    (re.compile(r'\d{3}[\s.-]\d{3}[\s.-]\d{4}'), True),
    # labelled digit blob
    (re.compile(r'(?:phone|mobile|cell|tel|telephone|contact|ph|mob)[\s:]*([+\d\s().-]{10,20})', re.IGNORECASE), False),
    # +91 98765 43210
    (re.compile(r'\+\d{1,3}\s?\d{5}\s?\d{5}'), False),
    # +1 (123) 456-7890
    (re.compile(r'\+\d{1,3}\s?\(\d{3}\)\s?\d{3}[\s.-]?\d{4}'), False),
    # compact 10 digits
    (re.compile(r'\b\d{10}\b'), False),
)
PHONE_KEYWORD_RE = re.compile(r'\b(?:phone|mobile|cell|tel|contact|number|call|reach)\b', re.IGNORECASE)
DIGIT_BLOB_RE = re.compile(r'[+\d\s().-]{10,20}')
BARE_TEN_DIGITS_RE = re.compile(r'\b\d{10}\b')


def _is_fake_sequence(digits: str) -> bool:
    return bool(re.match(r'^(\d)\1+$', digits)) or digits in FAKE_PHONE_SEQUENCES


def is_valid_phone(phone: str, digits: str = None) -> bool:
    """
    Shape checks tuned for an India/US applicant pool.

    This is not a general E.164 validator: a 10-digit number is taken to be
    an Indian mobile and an 11-digit one a North-American number.
    """
    if digits is None:
        digits = re.sub(r'\D', '', phone)
    if not re.match(r'^[+\d]', phone):
        return False
    if phone.count('+') > 1:
        return False
    if _is_fake_sequence(digits):
        return False

    if len(digits) == 12 and digits.startswith('91'):
        if not re.match(r'^[6-9]', digits[2:]):
            return False
    if len(digits) == 10 and not re.match(r'^[6-9]', digits):
        return False
    if len(digits) == 11 and not digits.startswith('1'):
        return False
    return True


def format_phone(phone: str, digits: str = None) -> str:
    if digits is None:
        digits = re.sub(r'\D', '', phone)
    if phone.startswith('+'):
        return phone
    if len(digits) == 10 and re.match(r'^[6-9]', digits):
        return f"+91{digits}"
    if len(digits) == 12 and digits.startswith('91'):
        return f"+{digits}"
    if len(digits) == 11 and digits.startswith('1'):
        return f"+{digits}"
    if 10 < len(digits) <= 15:
        return f"+{digits}"
    return ''


def clean_phone(phone: str, north_american: bool = False) -> str:
    """Turn a raw candidate into a +-prefixed number, or '' when it is not a phone."""
    cleaned = PHONE_LABEL_RE.sub('', phone.lower())
    cleaned = re.sub(r'[^\d+]', '', cleaned)
    cleaned = re.sub(r'^00', '+', cleaned)
    digits = re.sub(r'\D', '', cleaned)

    if len(digits) < MIN_PHONE_DIGITS or len(digits) > MAX_PHONE_DIGITS:
        return ''
    if is_valid_phone(cleaned, digits):
        return format_phone(cleaned, digits)

    # (555) 123-4567 style numbers carry no country code; read them as +1
    if north_american and len(digits) == 10 and not cleaned.startswith('+'):
        if _is_fake_sequence(digits):
            return ''
        us_digits = '1' + digits
        if is_valid_phone(us_digits, us_digits):
            return format_phone(us_digits, us_digits)
    return ''


def _add_phone(found: Dict[str, None], candidate: str, north_american: bool = False) -> None:
    phone = clean_phone(candidate.strip(), north_american)
    if phone:
        found.setdefault(phone, None)


def extract_phones(text: str) -> List[str]:
    found: Dict[str, None] = {}
    flat = normalize_text(text)
    lines = split_lines(text)

    for pattern, north_american in PHONE_PATTERNS:
        for m in pattern.finditer(flat):
            _add_phone(found, m.group(1) if m.lastindex else m.group(0), north_american)

    for i, line in enumerate(lines):
        if PHONE_KEYWORD_RE.search(line):
            for nearby in lines[i:i + PROXIMITY_WINDOW]:
                for m in DIGIT_BLOB_RE.finditer(nearby):
                    _add_phone(found, m.group(0))

    for line in lines[:HEADER_LINE_COUNT]:
        for m in BARE_TEN_DIGITS_RE.finditer(line):
            _add_phone(found, m.group(0))

    return list(found)


def extract_contact_info(text: str) -> ExtractedContact:
    emails = extract_emails(text)
    phones = extract_phones(text)
    logger.debug("Contact extraction: %d email(s), %d phone(s)", len(emails), len(phones))
    return ExtractedContact(
        email=emails[0] if emails else '',
        phone=phones[0] if phones else '',
    )
