# gemini_parser.py
import re
import json
import asyncio
import logging
from typing import Any, Dict, List, Optional

from google import genai

import config
from models import DocumentKind

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """The extraction model could not produce a usable answer."""


class OracleUnavailable(OracleError):
    """No API key is configured, so the model is never called."""


RESUME_PROMPT = """
Extract the following information from this resume:
- Full name
- Email address
- Phone number
- List of skills (as an array)
- Years of experience (just the number)
- Education details

Format the response as a JSON object with these exact keys: name, email, phone, skills (array), experience (string), education (string).

Resume content:
{text}
"""

JOB_PROMPT = """
Extract the following information from this job description:
- Job title
- Required skills (as an array)
- Years of experience required (just the number)
- Job responsibilities (as an array)

Format the response as a JSON object with these exact keys: title, skills (array), experience (string), responsibilities (array).

Job description content:
{text}
"""

RESUME_FIELDS = ('name', 'email', 'phone', 'education')
JOB_FIELDS = ('title',)
LIST_SPLIT_RE = re.compile(r'[,;\n|]')

_client = None


def get_gemini_client():
    global _client
    if not config.GEMINI_API_KEY:
        raise OracleUnavailable("GEMINI_API_KEY is not set")
    if _client is None:
        _client = genai.Client(api_key=config.GEMINI_API_KEY)
        logger.info("Gemini client initialized (model %s)", config.GEMINI_MODEL)
    return _client


def build_prompt(text: str, kind: DocumentKind) -> str:
    template = RESUME_PROMPT if DocumentKind(kind) is DocumentKind.RESUME else JOB_PROMPT
    return template.format(text=text)


def clean_gemini_output(text: str) -> str:
    """Removes markdown-style ```json and ``` from Gemini output."""
    text = re.sub(r"^```(?:json)?\s*", "", text.strip())
    text = re.sub(r"\s*```$", "", text.strip())
    return text.strip()


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """First JSON object in a model answer, or None."""
    if not text:
        return None
    text = clean_gemini_output(text)
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    m = re.search(r'\{[\s\S]*\}', text)
    if m:
        try:
            data = json.loads(m.group(0))
        except json.JSONDecodeError:
            return None
        if isinstance(data, dict):
            return data
    return None


def normalize_list(value: Any) -> List[str]:
    """
    Coerce a loosely typed list field into a list of strings.

    Lists are flattened one level and non-string items dropped. A string is
    read as a JSON array when it is one, otherwise split on commas,
    semicolons, newlines and pipes. Items are trimmed and deduplicated
    case-insensitively, first spelling kept.
    """
    items: List[str] = []
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith('['):
            try:
                decoded = json.loads(stripped)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, list):
                return normalize_list(decoded)
        items = LIST_SPLIT_RE.split(stripped)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, str):
                items.append(item)
            elif isinstance(item, (list, tuple)):
                items.extend(sub for sub in item if isinstance(sub, str))

    result: List[str] = []
    seen = set()
    for item in items:
        item = item.strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            result.append(item)
    return result


def normalize_experience(value: Any) -> str:
    """First integer in the value as a string ("5+ years" -> "5"), else ""."""
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(int(value)) if value >= 0 else ""
    m = re.search(r'\d+', str(value))
    return str(int(m.group(0))) if m else ""


def _text_field(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def relaxed_decode(payload: Dict[str, Any], kind: DocumentKind) -> Dict[str, Any]:
    """Map a model answer onto the record fields for ``kind``, tolerating loose types."""
    payload = payload if isinstance(payload, dict) else {}
    if DocumentKind(kind) is DocumentKind.RESUME:
        decoded = {key: _text_field(payload.get(key)) for key in RESUME_FIELDS}
    else:
        decoded = {key: _text_field(payload.get(key)) for key in JOB_FIELDS}
        decoded['responsibilities'] = normalize_list(payload.get('responsibilities'))
    decoded['skills'] = normalize_list(payload.get('skills'))
    decoded['experience'] = normalize_experience(payload.get('experience'))
    return decoded


async def parse_with_gemini(text: str, kind: DocumentKind, timeout: float = None) -> Dict[str, Any]:
    """
    Ask Gemini for the structured fields of a document.

    Raises OracleUnavailable when no key is configured and OracleError for
    timeouts, request failures, blocked prompts and answers without JSON.
    """
    client = get_gemini_client()
    timeout = config.ORACLE_TIMEOUT_SECONDS if timeout is None else timeout

    try:
        response = await asyncio.wait_for(
            asyncio.to_thread(
                client.models.generate_content,
                model=config.GEMINI_MODEL,
                contents=build_prompt(text, kind),
            ),
            timeout,
        )
    except asyncio.TimeoutError as e:
        raise OracleError(f"Gemini did not answer within {timeout}s") from e
    except Exception as e:
        raise OracleError(f"Gemini request failed: {e}") from e

    feedback = getattr(response, 'prompt_feedback', None)
    if feedback is not None and getattr(feedback, 'block_reason', None):
        raise OracleError(f"Gemini blocked the prompt: {feedback.block_reason}")

    payload = extract_json_object(response.text or "")
    if payload is None:
        raise OracleError("Gemini answer contained no JSON object")
    logger.debug("Gemini returned keys: %s", sorted(payload))
    return relaxed_decode(payload, kind)
