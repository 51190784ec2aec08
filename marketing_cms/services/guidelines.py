"""
Brand guideline gate.
"""
from typing import Any, Dict, List, Optional

from marketing_cms.core.exceptions import GuidelineViolationError
from marketing_cms.models.brand import Brand


def find_avoided_terms(text: str, guidelines: Optional[Dict[str, Any]]) -> List[str]:
    """
    Return the avoided terms found in text, case-insensitively.
    Terms are returned as written in the guidelines, in guideline order.
    """
    if not guidelines or not text:
        return []
    
    haystack = text.lower()
    matched = []
    for term in guidelines.get("avoided_terms") or []:
        needle = (term or "").strip().lower()
        if needle and needle in haystack and term not in matched:
            matched.append(term)
    return matched


def check_guidelines(text: str, brand: Brand) -> None:
    """Raise GuidelineViolationError if text uses any of the brand's avoided terms."""
    matched = find_avoided_terms(text, brand.guidelines)
    if matched:
        raise GuidelineViolationError(matched, brand_id=brand.id)
