"""Split human-readable template names into a base name and a variant label."""

from __future__ import annotations

import re

_EXTENSIONS = (".docx", ".DOCX", ".doc", ".DOC")

# Tried in order; specific keyword forms must precede the generic catch-all.
_NAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(.+?)[\s_\-]+?(ด้านหน้า|ด้านหลัง|หน้า|หลัง|สำเนา|ฉบับจริง|ต้นฉบับ)(.*)$"),
    re.compile(r"^(.+?)[\s_\-]+?(แบบ\s*[กขคงจฉชซฌญ]|แบบ\s*\d+|รูปแบบ\s*\d+)(.*)$"),
    re.compile(r"^(.+?)[\s_\-]+?(v\d+|version\s*\d+|เวอร์ชัน\s*\d+)(.*)$"),
    re.compile(r"^(.+?)[\s_\-]+?(\d+)$"),
    re.compile(r"^(.+?)[\s_\-]+?(front|back|copy|original)(.*)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s*[\(（](.+?)[\)）]$"),
    re.compile(r"^(.+?)[\s_\-]+([^\s_\-]{1,10})$"),
)

_MIN_BASE_LENGTH = 2
_SEPARATORS_RE = re.compile(r"[\s_\-]+")


def clean_template_name(name: str) -> str:
    """Strip a Word file extension and surrounding whitespace."""

    name = name.strip()
    for extension in _EXTENSIONS:
        if name.endswith(extension):
            name = name[: -len(extension)]
            break
    return name.strip()


def extract_base_and_variant(name: str) -> tuple[str, str]:
    """Return ``(base, variant)``; unrecognized names give ``(cleaned, "")``.

    Examples:
        "ID Card Front.docx" -> ("ID Card", "Front")
        "สูติบัตร ด้านหลัง"     -> ("สูติบัตร", "ด้านหลัง")
        "Form (copy)"        -> ("Form", "copy")
    """

    if not name:
        return "", ""

    cleaned = clean_template_name(name)
    for pattern in _NAME_PATTERNS:
        match = pattern.match(cleaned)
        if match is None:
            continue
        base = match.group(1).strip()
        variant = match.group(2).strip()
        if match.re.groups > 2 and match.group(3):
            variant += match.group(3).strip()
        if len(base) >= _MIN_BASE_LENGTH and variant:
            return base, variant

    return cleaned, ""


def normalize_for_matching(value: str) -> str:
    """Lower-case and drop whitespace, underscores and dashes."""

    return _SEPARATORS_RE.sub("", value.lower())
