# document_parser.py
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import config
from contact_extractor import clean_phone, is_valid_email
from gemini_parser import OracleError, OracleUnavailable, parse_with_gemini
from models import DocumentKind, ParsedJobRequirement, ParsedResume
from name_extractor import clean_job_title, name_from_filename, title_from_filename
from resume_parser import extract_job_details, extract_resume_details
from resume_reader import extract_text
from skill_extractor import extract_skills
from text_cleaner import normalize_lines

logger = logging.getLogger(__name__)

ParsedDocument = Union[ParsedResume, ParsedJobRequirement]


def merge_skill_lists(*lists: Sequence[str]) -> List[str]:
    """Union in order, deduplicated case-insensitively, first spelling kept."""
    merged: List[str] = []
    seen = set()
    for skills in lists:
        for skill in skills or []:
            if isinstance(skill, str) and skill.strip() and skill.strip().lower() not in seen:
                seen.add(skill.strip().lower())
                merged.append(skill.strip())
    return merged


def _local_record(text: str, file_name: str, kind: DocumentKind) -> ParsedDocument:
    try:
        if kind is DocumentKind.RESUME:
            return extract_resume_details(text, file_name)
        return extract_job_details(text, file_name)
    except Exception:
        logger.exception("Local extraction failed for %s; continuing with an empty record", file_name)
        if kind is DocumentKind.RESUME:
            return ParsedResume(file_name=file_name)
        return ParsedJobRequirement(file_name=file_name)


async def _ask_oracle(text: str, kind: DocumentKind, file_name: str, oracle) -> Dict[str, Any]:
    if oracle is None or not text:
        return {}
    try:
        return await oracle(text, kind) or {}
    except OracleUnavailable as e:
        logger.info("Extraction oracle not configured (%s); using local heuristics for %s", e, file_name)
    except OracleError as e:
        logger.warning("Extraction oracle degraded for %s, using local heuristics only: %s", file_name, e)
    return {}


def _oracle_email(value: Any) -> str:
    email = value.strip().lower() if isinstance(value, str) else ''
    return email if is_valid_email(email) else ''


def _oracle_phone(value: Any) -> str:
    return clean_phone(value) if isinstance(value, str) else ''


def _merge_skills(local: List[str], from_oracle: List[str]) -> List[str]:
    if from_oracle:
        return merge_skill_lists(from_oracle, local)
    return list(local)


def _merge_resume(local: ParsedResume, found: Dict[str, Any]) -> ParsedResume:
    return ParsedResume(
        name=local.name or found.get('name', ''),
        email=local.email or _oracle_email(found.get('email')),
        phone=local.phone or _oracle_phone(found.get('phone')),
        skills=_merge_skills(local.skills, found.get('skills', [])),
        experience=local.experience or found.get('experience', ''),
        education=local.education or found.get('education', ''),
        file_name=local.file_name,
    )


def _merge_job(local: ParsedJobRequirement, found: Dict[str, Any]) -> ParsedJobRequirement:
    return ParsedJobRequirement(
        title=local.title or found.get('title', ''),
        skills=_merge_skills(local.skills, found.get('skills', [])),
        experience=local.experience or found.get('experience', ''),
        responsibilities=local.responsibilities or list(found.get('responsibilities', [])),
        file_name=local.file_name,
    )


def _is_empty(record: ParsedDocument) -> bool:
    if isinstance(record, ParsedResume):
        fields = (record.name, record.email, record.phone, record.skills, record.experience, record.education)
    else:
        fields = (record.title, record.skills, record.experience, record.responsibilities)
    return not any(fields)


async def parse_document(file_name: str, data: bytes, kind: DocumentKind,
                         oracle: Optional[Callable] = parse_with_gemini) -> ParsedDocument:
    """
    Decode one uploaded file and build its record.

    Stages, in order: decode, normalize, local heuristics, extraction
    oracle, merge, aggressive skill pass when too few skills were found,
    and the filename fallback for name or title. Decode errors propagate;
    heuristic and oracle failures only degrade the record. A record with
    nothing extracted is returned with ``incomplete`` set.
    """
    kind = DocumentKind(kind)
    raw_text = await asyncio.to_thread(extract_text, file_name, data)
    text = normalize_lines(raw_text)

    local = _local_record(text, file_name, kind)
    found = await _ask_oracle(text, kind, file_name, oracle)

    if kind is DocumentKind.RESUME:
        record = _merge_resume(local, found)
    else:
        record = _merge_job(local, found)

    if text and len(record.skills) < config.AGGRESSIVE_SKILL_THRESHOLD:
        extra = extract_skills(text, is_requirement_doc=kind is DocumentKind.JOB_REQUIREMENT, aggressive=True)
        record.skills = merge_skill_lists(record.skills, extra)

    record.incomplete = _is_empty(record)
    if record.incomplete:
        logger.warning("%s processed with incomplete data", file_name)

    if isinstance(record, ParsedResume):
        record.name = record.name or name_from_filename(file_name)
    else:
        record.title = clean_job_title(record.title or title_from_filename(file_name))
    return record


async def process_batch(files: Sequence[Tuple[str, bytes]], kind: DocumentKind,
                        on_progress: Optional[Callable[[float], None]] = None,
                        batch_size: int = None,
                        oracle: Optional[Callable] = parse_with_gemini,
                        delay: float = None,
                        on_error: Optional[Callable[[str, Exception], None]] = None) -> List[ParsedDocument]:
    """
    Parse ``(file_name, data)`` pairs in FIFO sub-batches of ``batch_size``.

    Files in a sub-batch run concurrently and a failing file never cancels
    its siblings: it is logged, handed to ``on_error`` and left out of the
    result. ``on_progress`` receives the fraction done after each sub-batch.
    """
    batch_size = batch_size or config.BATCH_SIZE
    delay = config.BATCH_DELAY_SECONDS if delay is None else delay
    total = len(files)
    results: List[ParsedDocument] = []
    logger.info("Starting batch processing of %d file(s)", total)

    for start in range(0, total, batch_size):
        batch = files[start:start + batch_size]
        logger.debug("Processing batch %d/%d", start // batch_size + 1, -(-total // batch_size))
        outcomes = await asyncio.gather(
            *(parse_document(name, data, kind, oracle) for name, data in batch),
            return_exceptions=True,
        )
        for (name, _), outcome in zip(batch, outcomes):
            if isinstance(outcome, Exception):
                logger.error("Failed to parse %s: %s", name, outcome)
                if on_error:
                    on_error(name, outcome)
            elif isinstance(outcome, BaseException):
                # cancellation and interpreter exits are not per-file failures
                raise outcome
            else:
                results.append(outcome)

        if on_progress:
            on_progress(min((start + len(batch)) / total, 1.0))
        if delay and start + batch_size < total:
            await asyncio.sleep(delay)

    logger.info("Batch processing complete. Processed %d out of %d files", len(results), total)
    return results
