# invoicing/domain/services/gstin_pan_validation.py

import re

PAN_REGEX = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
# state(2) + PAN(10) + entity code + 'Z' + check character
GSTIN_REGEX = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def is_valid_pan(pan: str | None) -> bool:
    if not pan:
        return False
    pan = pan.strip().upper()
    return bool(PAN_REGEX.match(pan))


def is_valid_gstin(gstin: str | None) -> bool:
    """Shape check only; the check digit is not verified."""
    if not gstin:
        return False
    gstin = gstin.strip().upper()
    if len(gstin) != 15 or not GSTIN_REGEX.match(gstin):
        return False

    pan_part = gstin[2:12]
    return is_valid_pan(pan_part)


def pan_from_gstin(gstin: str | None) -> str | None:
    if not is_valid_gstin(gstin):
        return None
    return gstin.strip().upper()[2:12]


# ---------------------------------------------------------------------------
# Form-input sanitizers
# ---------------------------------------------------------------------------

def sanitize_gst_number(raw: str | None) -> str | None:
    """Uppercase and strip everything but A-Z / 0-9. ``None`` when empty."""
    if not raw:
        return None
    cleaned = _NON_ALNUM.sub("", raw.upper())
    return cleaned or None


def sanitize_pan_number(raw: str | None) -> str | None:
    if not raw:
        return None
    cleaned = _NON_ALNUM.sub("", raw.upper())
    return cleaned or None
