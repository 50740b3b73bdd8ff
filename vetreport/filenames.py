"""
Download file names for rendered documents.

License: MIT
"""

import re
import unicodedata
from datetime import datetime
from typing import Optional

SLUG_MAX_LENGTH = 30
DEFAULT_SLUG = "documento"

NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(text: Optional[str], fallback: str = DEFAULT_SLUG) -> str:
    """
    Lower-case, accent-folded slug of *text*.

    Runs of non-alphanumeric characters become a single ``-``; the result is
    cut to 30 characters. Empty input gives *fallback*.
    """
    folded = unicodedata.normalize("NFKD", text or "")
    folded = folded.encode("ascii", "ignore").decode("ascii").lower()
    slug = NON_ALNUM_PATTERN.sub("-", folded).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].strip("-")
    return slug or fallback


def build_filename(title: Optional[str], when: datetime, include_time: bool = True,
                   ext: str = "pdf") -> str:
    """
    File name of the form ``<slug>-<YYYY-MM-DD>[-<HH-MM-SS>].<ext>``.

    Args:
        title: Document title (slugged)
        when: Timestamp embedded in the name
        include_time: Append the time of day
        ext: File extension without the dot

    Returns:
        File name
    """
    stamp = when.strftime("%Y-%m-%d")
    if include_time:
        stamp += when.strftime("-%H-%M-%S")
    return f"{slugify(title)}-{stamp}.{ext}"


def clinical_record_filename(animal_name: Optional[str], when: datetime) -> str:
    return f"ficha-clinica-{slugify(animal_name, fallback='animal')}-{when:%Y-%m-%d}.pdf"


def report_filename(when: datetime) -> str:
    return f"relatorio-consulta-{when:%Y-%m-%d}.pdf"
