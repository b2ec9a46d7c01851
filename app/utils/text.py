# app/utils/text.py
import re
import unicodedata


def only_digits(s: str | None) -> str:
    return re.sub(r"\D+", "", s or "")


def strip_accents(s: str | None) -> str:
    # "Élodie" -> "Elodie"
    normalized = unicodedata.normalize("NFKD", s or "")
    return "".join(c for c in normalized if not unicodedata.combining(c))


def clean_optional(value: str | None) -> str | None:
    v = (value or "").strip()
    return v or None


def normalize_phone(value: str | None) -> str | None:
    v = (value or "").strip()
    if not v:
        return None
    digits = only_digits(v)
    return f"+{digits}" if v.startswith("+") else digits
