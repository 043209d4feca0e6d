"""
Duplicate detection for vendor submissions.

Candidates are compared on normalised email, normalised phone (last ten
digits) and, within the same city, on Levenshtein name similarity. Each
signal adds a weight; a candidate whose total reaches the threshold is
reported as a possible duplicate.
"""

import re
from collections.abc import Iterable

from viah.features.vendors.domain import DuplicateMatch, Vendor, VendorSubmission

EMAIL_WEIGHT = 0.7
PHONE_WEIGHT = 0.6
NEAR_IDENTICAL_NAME_WEIGHT = 0.5
SIMILAR_NAME_WEIGHT = 0.35
DEFAULT_THRESHOLD = 0.4


def normalize_string(value: str) -> str:
    return re.sub(r"\s+", " ", value.strip().lower())


def normalize_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone)[-10:]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def string_similarity(first: str, second: str) -> float:
    """1 - levenshtein(a, b) / max(len(a), len(b)) on normalised strings."""
    a, b = normalize_string(first), normalize_string(second)
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j], current[j - 1], previous[j - 1]))
        previous = current

    return 1 - previous[-1] / max(len(a), len(b))


def compare_vendor(submission: VendorSubmission, existing: Vendor) -> tuple[float, list[str]]:
    score = 0.0
    reasons: list[str] = []

    if submission.email and existing.email:
        if normalize_email(submission.email) == normalize_email(existing.email):
            score += EMAIL_WEIGHT
            reasons.append("Same email address")

    if submission.phone and existing.phone:
        phone = normalize_phone(submission.phone)
        if phone and phone == normalize_phone(existing.phone):
            score += PHONE_WEIGHT
            reasons.append("Same phone number")

    if normalize_string(submission.city) == normalize_string(existing.city):
        similarity = string_similarity(submission.name, existing.name)
        if similarity >= 0.95:
            score += NEAR_IDENTICAL_NAME_WEIGHT
            reasons.append(f"Nearly identical name in {existing.city} ({round(similarity * 100)}%)")
        elif similarity >= 0.8:
            score += SIMILAR_NAME_WEIGHT
            reasons.append(f"Similar name in {existing.city} ({round(similarity * 100)}%)")

    return score, reasons


def find_duplicate_vendors(
    submission: VendorSubmission,
    existing: Iterable[Vendor],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[DuplicateMatch]:
    """Possible duplicates, most confident first."""
    matches = []
    for vendor in existing:
        score, reasons = compare_vendor(submission, vendor)
        if score >= threshold:
            matches.append(
                DuplicateMatch(
                    vendor_id=vendor.id,
                    vendor_name=vendor.name,
                    confidence=min(score, 1.0),
                    reasons=reasons,
                )
            )

    matches.sort(key=lambda match: match.confidence, reverse=True)
    return matches
