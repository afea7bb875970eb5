"""Composer-style version constraint matching built on semantic_version.

Composer syntax is rewritten into the npm range grammar and matched with
``semantic_version.NpmSpec``. Supports ``*``, exact versions, comparison
operators (``<``, ``<=``, ``>``, ``>=``, ``=``, ``==``, ``!=``, ``<>``), caret
and tilde ranges, wildcards (``1.2.*``), hyphen ranges, AND (comma or
whitespace) and OR (``||`` or ``|``). Branch versions such as ``dev-main``
or ``2.x-dev`` only match ``*`` or the identical string.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

import semantic_version

logger = logging.getLogger(__name__)

_OR_SPLIT = re.compile(r"\s*\|\|?\s*")
_AND_SPLIT = re.compile(r"\s*,\s*|\s+")
_HYPHEN_RANGE = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")
_OPERATOR_GAP = re.compile(r"(<=|>=|<>|!=|==|<|>|=|\^|~)\s+")
_OPERATOR = re.compile(r"^(<=|>=|<>|!=|==|<|>|=|\^|~)?(.+)$")
_STABILITY_FLAG = re.compile(r"@(dev|alpha|beta|rc|stable)\b", re.IGNORECASE)
_WILDCARD = re.compile(r"(^|\.)[*xX]$")
_RELEASE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.\d+)?(.*)$")
_TWO_PART = re.compile(r"^(\d+)\.(\d+)$")


def is_branch_version(version: str) -> bool:
    """True for development branch versions that have no semantic ordering."""
    lowered = version.strip().lower()
    return lowered.startswith("dev-") or lowered.endswith("-dev")


def parse_version(text: str) -> Optional[semantic_version.Version]:
    """Coerce a composer version string into a Version, or None if impossible.

    Leading ``v`` is dropped and a fourth numeric component (``1.2.3.0``) is
    discarded so normalized and pretty versions compare equal.
    """
    text = text.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    if not text or is_branch_version(text):
        return None
    try:
        return semantic_version.Version.coerce(text).truncate("prerelease")
    except ValueError:
        return None


def _full_version(text: str) -> Optional[str]:
    """Pad ``1.2`` to ``1.2.0`` so npm does not read it as an x-range."""
    match = _RELEASE.match(text.lstrip("vV"))
    if not match:
        return None
    major, minor, patch, rest = match.groups()
    if rest and rest[0] not in "-+":
        rest = f"-{rest}"
    return f"{major}.{minor or 0}.{patch or 0}{rest}"


def _npm_term(term: str) -> Optional[str]:
    """Rewrite one composer comparator into npm syntax."""
    if term in ("*", "x", "X"):
        return "*"
    match = _OPERATOR.match(term)
    if not match:
        return None
    op, body = match.group(1) or "", match.group(2).lstrip("vV")

    if op == "^" or _WILDCARD.search(body):
        return f"{op}{body}"
    if op == "~":
        # Composer's two-part tilde only locks the major version.
        two_part = _TWO_PART.match(body)
        if two_part:
            major, minor = int(two_part.group(1)), int(two_part.group(2))
            return f">={major}.{minor}.0 <{major + 1}.0.0"
        return f"~{body}"

    version = _full_version(body)
    if version is None:
        return None
    return f"{'=' if op in ('', '==') else op}{version}"


def _npm_alternative(alternative: str) -> Tuple[Optional[str], List[semantic_version.Version]]:
    """Return the npm range for one OR branch plus the versions it excludes."""
    hyphen = _HYPHEN_RANGE.match(alternative)
    if hyphen:
        lower = hyphen.group(1).lstrip("vV")
        upper = hyphen.group(2).lstrip("vV")
        return f"{lower} - {upper}", []

    terms: List[str] = []
    excluded: List[semantic_version.Version] = []
    for term in _AND_SPLIT.split(_OPERATOR_GAP.sub(r"\1", alternative)):
        if not term:
            continue
        if term.startswith(("!=", "<>")):
            # npm ranges have no inequality operator.
            bound = parse_version(term[2:])
            if bound is None:
                return None, []
            excluded.append(bound)
            continue
        npm = _npm_term(term)
        if npm is None:
            return None, []
        terms.append(npm)
    return " ".join(terms) or "*", excluded


def _clean(constraint: str) -> str:
    constraint = constraint.split(" as ", 1)[0]
    constraint = _STABILITY_FLAG.sub("", constraint)
    return constraint.strip()


def _alternatives(constraint: str) -> List[str]:
    return [alt for alt in _OR_SPLIT.split(constraint) if alt.strip()]


def _branch_satisfies(version: str, constraint: str) -> bool:
    wanted = [alt.strip().lower() for alt in _alternatives(constraint)]
    return version.strip().lower() in wanted or "*" in wanted


def _spec_matches(spec: semantic_version.NpmSpec, version: semantic_version.Version) -> bool:
    if spec.match(version):
        return True
    # The lock already settled stability, so a pre-release counts as its release.
    return bool(version.prerelease) and spec.match(version.truncate())


def version_satisfies(version: str, constraint: Optional[str]) -> bool:
    """Return True if ``version`` satisfies the composer-style ``constraint``.

    Unparseable constraints or versions match nothing except ``*``.
    """
    constraint = _clean(constraint or "*") or "*"
    if constraint == "*":
        return True

    if is_branch_version(version):
        return _branch_satisfies(version, constraint)

    parsed = parse_version(version)
    if parsed is None:
        logger.debug("Unparseable version '%s' cannot satisfy '%s'", version, constraint)
        return False

    for alternative in _alternatives(constraint):
        npm_range, excluded = _npm_alternative(alternative)
        if npm_range is None:
            logger.debug("Unparseable constraint '%s'", alternative)
            continue
        try:
            spec = semantic_version.NpmSpec(npm_range)
        except ValueError:
            logger.debug("Unparseable constraint '%s' (as '%s')", alternative, npm_range)
            continue
        if parsed not in excluded and _spec_matches(spec, parsed):
            return True
    return False
