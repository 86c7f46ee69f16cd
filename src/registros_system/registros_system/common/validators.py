from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} es obligatorio")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Empty or blank text is stored as NULL, not as ''."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
