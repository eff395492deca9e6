# resume_reader.py
import io
import os
import logging

import docx  # python-docx
import PyPDF2
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.pdf', '.txt', '.docx')


class DocumentDecodeError(Exception):
    """The file could not be turned into text."""


class UnsupportedFormatError(DocumentDecodeError):
    pass


def _extension(file_name: str) -> str:
    return os.path.splitext((file_name or '').strip())[1].lower()


def extract_text_from_pdf(data: bytes) -> str:
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(data))
        text = ""
        for p in reader.pages:
            page_text = p.extract_text()
            if page_text:
                text += "\n" + page_text
    except (PdfReadError, ValueError, KeyError) as e:
        raise DocumentDecodeError(f"Unreadable PDF: {e}") from e
    return text.strip()


def extract_text_from_txt(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DocumentDecodeError(f"Text file is not valid UTF-8: {e}") from e


def extract_text_from_docx(data: bytes) -> str:
    try:
        doc = docx.Document(io.BytesIO(data))
    except Exception as e:
        # python-docx surfaces bad zips and bad XML as several unrelated types
        raise DocumentDecodeError(f"Unreadable DOCX: {e}") from e
    return "\n".join(p.text for p in doc.paragraphs)


READERS = {
    '.pdf': extract_text_from_pdf,
    '.txt': extract_text_from_txt,
    '.docx': extract_text_from_docx,
}


def extract_text(file_name: str, data: bytes) -> str:
    """
    Raw text of an uploaded document, chosen by file extension.

    Raises UnsupportedFormatError for anything but .pdf, .txt and .docx, and
    DocumentDecodeError when the content is corrupt. A document with no text
    returns "".
    """
    ext = _extension(file_name)
    if ext == '.doc':
        raise UnsupportedFormatError(
            f"Legacy .doc files are not supported ({file_name}); save it as .docx or PDF")
    reader = READERS.get(ext)
    if reader is None:
        raise UnsupportedFormatError(
            f"Unsupported file type for {file_name}. Supported: {', '.join(SUPPORTED_EXTENSIONS)}")
    text = reader(data)
    logger.debug("Decoded %s: %d characters", file_name, len(text))
    return text
