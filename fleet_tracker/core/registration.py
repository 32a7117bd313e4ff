"""
Registration normalization and tracker-device to vehicle matching.

Webhooks receive registrations typed by people ("ab12 cde") and tracker device
names chosen by people ("Transit Van 2"), so both need loose matching against
the fleet.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Protocol, TypeVar

from rapidfuzz.distance import Levenshtein

_WHITESPACE = re.compile(r"\s+")

MAX_EDIT_DISTANCE = 2


class _HasMakeModel(Protocol):
    make: str
    model: str


VehicleT = TypeVar("VehicleT", bound=_HasMakeModel)


def normalize_registration(value: Optional[str]) -> str:
    """Remove all whitespace and upper-case: ``" ab12  cde "`` -> ``"AB12CDE"``."""
    if not value:
        return ""
    return _WHITESPACE.sub("", value).upper()


def is_similar(a: str, b: str) -> bool:
    """Loose word comparison used for device names.

    Equal or substring (either way) after lower-casing counts as similar;
    otherwise an edit distance of at most two, for words of similar length.
    """
    a, b = a.strip().lower(), b.strip().lower()
    if not a or not b:
        return False
    if a == b or a in b or b in a:
        return True
    if abs(len(a) - len(b)) <= MAX_EDIT_DISTANCE:
        return Levenshtein.distance(a, b, score_cutoff=MAX_EDIT_DISTANCE) <= MAX_EDIT_DISTANCE
    return False


def _words(value: str) -> list[str]:
    return [w for w in _WHITESPACE.split(value.lower()) if w]


def _device_matches(device: str, device_words: list[str], vehicle: _HasMakeModel) -> bool:
    make = (vehicle.make or "").lower()
    model = (vehicle.model or "").lower()
    full = f"{make} {model}"
    if device == full or full in device or device in full:
        return True

    if any(is_similar(w, make) for w in device_words) and any(is_similar(w, model) for w in device_words):
        return True

    model_words = _words(model)
    for word in device_words:
        if not is_similar(word, make):
            continue
        if any(other != word and is_similar(other, m) for m in model_words for other in device_words):
            return True
    return False


def match_device_to_vehicle(device_name: str, vehicles: Iterable[VehicleT]) -> Optional[VehicleT]:
    """Find the vehicle a tracker device name refers to.

    A vehicle matches when any of these hold, and the first matching vehicle
    wins:

    1. "make model" equals the device name, or one contains the other.
    2. Some device word is similar to the make and some device word is
       similar to the model.
    3. A device word is similar to the make and a different device word is
       similar to one word of a multi-word model ("Transit Custom").
    """
    device = device_name.strip().lower()
    if not device:
        return None
    device_words = _words(device)
    return next((v for v in vehicles if _device_matches(device, device_words, v)), None)
