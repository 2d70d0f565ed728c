"""
Shared helpers for the quiz certificate service.
Small request-parsing and response utilities used by the route modules.
"""
import hashlib
import math
import re
from numbers import Real
from typing import Any, Optional
from flask import jsonify

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/\x00]')
MAX_STEM_BYTES = 200


def json_error(message: str, status: int):
    """Return the `{error}` JSON body used for every failure response."""
    return jsonify({'error': message}), status


def parse_percent(value: Any) -> Optional[float]:
    """Parse a percent query value. Returns None for anything that is not a finite number."""
    if value is None:
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def is_number(value: Any) -> bool:
    """True for finite real numbers; bools are excluded even though they subclass int."""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def certificate_stem(name: str) -> str:
    """Filesystem-safe stem for a display name.

    Keeps any Unicode text and only replaces path separators and NUL bytes, and
    drops leading dots. A name with nothing left, or one too long for a file
    name, gets a short hash so every name still maps to one fixed file.
    """
    name = name or ''
    digest = hashlib.sha256(name.encode('utf-8')).hexdigest()[:12]
    stem = _UNSAFE_FILENAME_CHARS.sub('_', name).strip().lstrip('.').strip()
    if not stem:
        return digest
    encoded = stem.encode('utf-8')
    if len(encoded) > MAX_STEM_BYTES:
        return f"{encoded[:MAX_STEM_BYTES].decode('utf-8', 'ignore')}-{digest}"
    return stem


def certificate_filename(name: str, suffix: str) -> str:
    return f'{certificate_stem(name)}{suffix}'
