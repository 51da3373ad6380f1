import logging
import re
from typing import Iterator, List, Set

from docx import Document

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\[([^\[\]]+)\]")
_XML_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def iter_document_paragraphs(doc) -> Iterator:
    """Yields body, table-cell, header and footer paragraphs of a python-docx Document."""
    yield from doc.paragraphs
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                yield from cell.paragraphs
    for section in doc.sections:
        for part in (section.header, section.footer):
            # a linked header has no part of its own; touching it would create one
            if part.is_linked_to_previous:
                continue
            yield from part.paragraphs
            for table in part.tables:
                for row in table.rows:
                    for cell in row.cells:
                        yield from cell.paragraphs


def extract_placeholders_from_text(text: str) -> List[str]:
    """
    Returns unique [placeholder] names in order of first appearance.
    XML tags are removed first, so raw document.xml content can be passed in.
    """
    if not text:
        return []
    plain = _WHITESPACE_PATTERN.sub(" ", _XML_TAG_PATTERN.sub(" ", text))
    found: List[str] = []
    for match in PLACEHOLDER_PATTERN.findall(plain):
        name = match.strip()
        if name and name not in found:
            found.append(name)
    return found


def extract_placeholders(template_path: str) -> List[str]:
    """Reads the template and extracts all unique, cleaned placeholder names."""
    logger.info(f"Extracting placeholders from: {template_path}")
    placeholders: Set[str] = set()
    try:
        doc = Document(template_path)
        for para in iter_document_paragraphs(doc):
            placeholders.update(extract_placeholders_from_text(para.text))

        if not placeholders:
            logger.warning(f"No placeholders found in {template_path}")
            return []

        logger.info(f"Found {len(placeholders)} unique placeholders.")
        return sorted(placeholders)
    except Exception as e:
        logger.error(f"Error reading placeholders from template '{template_path}': {e}")
        return []


def categorize_template(filename: str) -> str:
    lower_filename = filename.lower()
    if "name mismatch" in lower_filename:
        return "NAME_MISMATCH"
    if "form-a" in lower_filename or "form a" in lower_filename:
        return "FORM_A"
    if "form-b" in lower_filename or "form b" in lower_filename:
        return "FORM_B"
    if "isr-" in lower_filename:
        return "ISR_FORMS"
    if "annexure" in lower_filename:
        return "ANNEXURES"
    return "OTHER"


def clean_template_name(filename: str) -> str:
    """'Form-A_affidavit_Template.docx' -> 'Form-A Affidavit'."""
    name = filename.replace("_Template.docx", "").replace(".docx", "").replace("_", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name).strip()
