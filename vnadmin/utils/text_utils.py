"""
Text processing utilities for name normalization.

Every index key and every comparison goes through normalize_text():
two names are "the same" iff their normalized forms are equal.
"""
import re
import unicodedata
from functools import lru_cache
from typing import List, Tuple

from ..config import CACHE_MAX_SIZE


WHITESPACE_PATTERN = re.compile(r'\s+')
DIGIT_RUN_PATTERN = re.compile(r'(\d+)')

# Vietnamese character mapping for accent removal
VIETNAMESE_MAP = {
    'à': 'a', 'á': 'a', 'ả': 'a', 'ã': 'a', 'ạ': 'a',
    'ă': 'a', 'ằ': 'a', 'ắ': 'a', 'ẳ': 'a', 'ẵ': 'a', 'ặ': 'a',
    'â': 'a', 'ầ': 'a', 'ấ': 'a', 'ẩ': 'a', 'ẫ': 'a', 'ậ': 'a',
    'è': 'e', 'é': 'e', 'ẻ': 'e', 'ẽ': 'e', 'ẹ': 'e',
    'ê': 'e', 'ề': 'e', 'ế': 'e', 'ể': 'e', 'ễ': 'e', 'ệ': 'e',
    'ì': 'i', 'í': 'i', 'ỉ': 'i', 'ĩ': 'i', 'ị': 'i',
    'ò': 'o', 'ó': 'o', 'ỏ': 'o', 'õ': 'o', 'ọ': 'o',
    'ô': 'o', 'ồ': 'o', 'ố': 'o', 'ổ': 'o', 'ỗ': 'o', 'ộ': 'o',
    'ơ': 'o', 'ờ': 'o', 'ớ': 'o', 'ở': 'o', 'ỡ': 'o', 'ợ': 'o',
    'ù': 'u', 'ú': 'u', 'ủ': 'u', 'ũ': 'u', 'ụ': 'u',
    'ư': 'u', 'ừ': 'u', 'ứ': 'u', 'ử': 'u', 'ữ': 'u', 'ự': 'u',
    'ỳ': 'y', 'ý': 'y', 'ỷ': 'y', 'ỹ': 'y', 'ỵ': 'y',
    'đ': 'd',
    'À': 'A', 'Á': 'A', 'Ả': 'A', 'Ã': 'A', 'Ạ': 'A',
    'Ă': 'A', 'Ằ': 'A', 'Ắ': 'A', 'Ẳ': 'A', 'Ẵ': 'A', 'Ặ': 'A',
    'Â': 'A', 'Ầ': 'A', 'Ấ': 'A', 'Ẩ': 'A', 'Ẫ': 'A', 'Ậ': 'A',
    'È': 'E', 'É': 'E', 'Ẻ': 'E', 'Ẽ': 'E', 'Ẹ': 'E',
    'Ê': 'E', 'Ề': 'E', 'Ế': 'E', 'Ể': 'E', 'Ễ': 'E', 'Ệ': 'E',
    'Ì': 'I', 'Í': 'I', 'Ỉ': 'I', 'Ĩ': 'I', 'Ị': 'I',
    'Ò': 'O', 'Ó': 'O', 'Ỏ': 'O', 'Õ': 'O', 'Ọ': 'O',
    'Ô': 'O', 'Ồ': 'O', 'Ố': 'O', 'Ổ': 'O', 'Ỗ': 'O', 'Ộ': 'O',
    'Ơ': 'O', 'Ờ': 'O', 'Ớ': 'O', 'Ở': 'O', 'Ỡ': 'O', 'Ợ': 'O',
    'Ù': 'U', 'Ú': 'U', 'Ủ': 'U', 'Ũ': 'U', 'Ụ': 'U',
    'Ư': 'U', 'Ừ': 'U', 'Ứ': 'U', 'Ử': 'U', 'Ữ': 'U', 'Ự': 'U',
    'Ỳ': 'Y', 'Ý': 'Y', 'Ỷ': 'Y', 'Ỹ': 'Y', 'Ỵ': 'Y',
    'Đ': 'D',
}
_VIETNAMESE_TABLE = str.maketrans(VIETNAMESE_MAP)


@lru_cache(maxsize=CACHE_MAX_SIZE)
def remove_vietnamese_accents(text: str) -> str:
    """
    Remove accents from text.

    Precomposed Vietnamese letters go through VIETNAMESE_MAP; anything
    left (decomposed input, other Latin accents) loses its combining marks
    after NFD decomposition.

    Example:
        >>> remove_vietnamese_accents("Điện Biên Phủ")
        'Dien Bien Phu'
    """
    if not text:
        return text

    result = text.translate(_VIETNAMESE_TABLE)
    decomposed = unicodedata.normalize('NFD', result)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


@lru_cache(maxsize=CACHE_MAX_SIZE)
def normalize_text(text: str) -> str:
    """
    Canonical comparison key: lowercase, accent-free, trimmed.

    Total and idempotent; None or empty input gives ''.
    Inner whitespace is kept as-is (word splitting handles runs).

    Example:
        >>> normalize_text("  Thành phố Hà Nội ")
        'thanh pho ha noi'
    """
    if not text:
        return ""

    return remove_vietnamese_accents(text.lower()).strip()


def split_words(text: str) -> List[str]:
    """
    Split already-normalized text into words.

    Example:
        >>> split_words("thanh pho  ha noi")
        ['thanh', 'pho', 'ha', 'noi']
    """
    if not text:
        return []
    return text.split()


@lru_cache(maxsize=CACHE_MAX_SIZE)
def name_sort_key(name: str) -> Tuple:
    """
    Sort key for display names.

    Accent-insensitive first, digit runs compared as numbers
    ("Phường 2" before "Phường 10"), original text breaks ties so
    accented and plain spellings keep a stable order.
    """
    normalized = normalize_text(name)
    parts = tuple(
        (0, int(chunk), '') if DIGIT_RUN_PATTERN.fullmatch(chunk) else (1, 0, chunk)
        for chunk in DIGIT_RUN_PATTERN.split(normalized)
        if chunk
    )
    return parts, name or ''


def clear_cache():
    """Clear all LRU caches to free memory."""
    remove_vietnamese_accents.cache_clear()
    normalize_text.cache_clear()
    name_sort_key.cache_clear()
