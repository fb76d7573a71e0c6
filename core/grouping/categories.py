"""Document category guessing and URL-safe code generation."""

from __future__ import annotations

import hashlib
import re
from types import MappingProxyType

# Ordered; the first keyword found in the name decides the category.
CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("บัตรประชาชน", "identification"),
    ("บัตรประจำตัว", "identification"),
    ("หนังสือเดินทาง", "identification"),
    ("passport", "identification"),
    ("id card", "identification"),
    ("สูติบัตร", "certificate"),
    ("มรณบัตร", "certificate"),
    ("ทะเบียนสมรส", "certificate"),
    ("ใบสมรส", "certificate"),
    ("ทะเบียนหย่า", "certificate"),
    ("ใบรับรองแพทย์", "medical"),
    ("ใบรับรอง", "certificate"),
    ("certificate", "certificate"),
    ("สำเนาทะเบียน", "government"),
    ("ทะเบียนบ้าน", "government"),
    ("ใบอนุญาต", "government"),
    ("สัญญา", "contract"),
    ("contract", "contract"),
    ("แบบฟอร์ม", "application"),
    ("คำขอ", "application"),
    ("ใบสมัคร", "application"),
    ("application", "application"),
    ("ใบเสร็จ", "financial"),
    ("ใบแจ้งหนี้", "financial"),
    ("ใบกำกับ", "financial"),
    ("invoice", "financial"),
    ("receipt", "financial"),
    ("ประกาศนียบัตร", "education"),
    ("ใบแสดงผลการเรียน", "education"),
    ("transcript", "education"),
    ("บันทึก", "government"),
    ("หนังสือ", "government"),
    ("รายงาน", "other"),
)

CATEGORY_COLORS = MappingProxyType(
    {
        "identification": "#3B82F6",
        "certificate": "#10B981",
        "contract": "#F59E0B",
        "application": "#8B5CF6",
        "financial": "#EF4444",
        "government": "#6366F1",
        "education": "#EC4899",
        "medical": "#14B8A6",
        "other": "#6B7280",
    }
)

DEFAULT_CATEGORY = "other"
MAX_CODE_LENGTH = 50
_HASH_LENGTH = 12

_NON_WORD_RE = re.compile(r"\W+", re.ASCII)
_UNDERSCORES_RE = re.compile(r"_+")


def _assert_categories_known() -> None:
    unknown = {category for _, category in CATEGORY_KEYWORDS} - set(CATEGORY_COLORS)
    if unknown:
        raise RuntimeError(f"Category keywords reference unknown categories: {sorted(unknown)}")


_assert_categories_known()


def find_category_keyword(name: str) -> str | None:
    lowered = name.lower()
    for keyword, _ in CATEGORY_KEYWORDS:
        if keyword in lowered:
            return keyword
    return None


def guess_category(name: str) -> str:
    lowered = name.lower()
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return DEFAULT_CATEGORY


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS[DEFAULT_CATEGORY])


def generate_code(name: str) -> str:
    """Build a ``[a-z0-9_]`` code of at most 50 characters.

    Names without ASCII word characters (pure Thai names, for instance) fall
    back to ``doc_`` plus 12 hex characters of the name's SHA-256 digest.
    """

    code = _NON_WORD_RE.sub("_", name.lower())
    code = _UNDERSCORES_RE.sub("_", code).strip("_")
    code = code[:MAX_CODE_LENGTH].rstrip("_")

    if not code:
        digest = hashlib.sha256(name.encode("utf-8")).hexdigest()
        code = f"doc_{digest[:_HASH_LENGTH]}"
    return code
