import logging
import re
from typing import Dict

from docx import Document

from .template_utils import iter_document_paragraphs

logger = logging.getLogger(__name__)


def _replace_in_paragraph(paragraph, patterns: Dict[str, "re.Pattern"], data: Dict[str, str]) -> Dict[str, int]:
    """
    Replaces [key] occurrences in one paragraph and returns per-key counts.

    Word often splits a placeholder across several runs ("[Name as per ", "PAN C1]").
    Placeholders contained in a single run are replaced in place so the run keeps
    its formatting; otherwise the paragraph text is rewritten into its first run.
    """
    counts: Dict[str, int] = {}
    if "[" not in paragraph.text:
        return counts

    for run in paragraph.runs:
        if "[" not in run.text:
            continue
        text = run.text
        for key, pattern in patterns.items():
            text, n = pattern.subn(lambda _m, k=key: data[k], text)
            if n:
                counts[key] = counts.get(key, 0) + n
        if text != run.text:
            run.text = text

    remaining = paragraph.text
    split_keys = [key for key, pattern in patterns.items() if pattern.search(remaining)]
    if split_keys and paragraph.runs:
        for key in split_keys:
            remaining, n = patterns[key].subn(lambda _m, k=key: data[k], remaining)
            counts[key] = counts.get(key, 0) + n
        paragraph.runs[0].text = remaining
        for run in paragraph.runs[1:]:
            run.text = ""
    return counts


def fill_word_document(template_path: str, data: Dict[str, str], output_path: str) -> int:
    """
    Fills [placeholder] occurrences in a Word document with the resolved values.

    Body paragraphs, table cells, headers and footers are all searched. A warning
    is logged for every key in `data` that does not occur in the document.

    Returns:
        Total number of replacements made.
    """
    try:
        doc = Document(template_path)
        patterns = {key: re.compile(re.escape(f"[{key}]")) for key in data}
        values = {key: "" if value is None else str(value) for key, value in data.items()}

        totals: Dict[str, int] = {}
        for paragraph in iter_document_paragraphs(doc):
            for key, n in _replace_in_paragraph(paragraph, patterns, values).items():
                totals[key] = totals.get(key, 0) + n

        for key in data:
            if not totals.get(key):
                logger.warning(f"Placeholder '[{key}]' not found in {template_path}")

        doc.save(output_path)
        replaced = sum(totals.values())
        logger.info(f"Successfully created filled document: {output_path} ({replaced} replacements)")
        return replaced

    except Exception as e:
        logger.error(f"Error in fill_word_document: {e}")
        raise
