"""
Fuzzy resolution of enumerated property values.

Callers (often language models) supply select, status and multi-select
values that are close to, but not exactly, an existing option: "in prog"
for "In Progress", "bug" for "Bugs". The resolver replaces each such value
with the closest option and reports every substitution as a warning.

Values may be plain (`"In Progress"`, `["a", "b"]`) or in the store's
property shape (`{"status": {"name": ...}}`, `{"multi_select": [{"name": ...}]}`);
resolved values keep the shape they came in.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from ..config import config
from ..models.entities import FuzzyMatchResult
from ..store.base import BlockStore, StoreError

ENUM_TYPES = ("select", "status", "multi_select")
TYPE_LABELS = {"select": "Select", "status": "Status", "multi_select": "Multi-select"}


def _bigrams(text: str) -> Set[str]:
    return {text[i:i + 2] for i in range(len(text) - 1)}


def string_similarity(a: str, b: str) -> float:
    """
    Similarity of two strings in [0, 1], ignoring case and surrounding space.

    1.0 for equal strings, 0.9 when one is a prefix of the other, 0.8 when
    one contains the other, otherwise the Sørensen-Dice coefficient of their
    character bigram sets.
    """
    s1 = a.lower().strip()
    s2 = b.lower().strip()

    if s1 == s2:
        return 1.0
    if s1.startswith(s2) or s2.startswith(s1):
        return 0.9
    if s1 in s2 or s2 in s1:
        return 0.8

    bigrams1 = _bigrams(s1)
    bigrams2 = _bigrams(s2)
    if not bigrams1 or not bigrams2:
        return 0.0

    return 2 * len(bigrams1 & bigrams2) / (len(bigrams1) + len(bigrams2))


def find_best_match(value: str, options: List[str],
                    threshold: float = 0.5) -> Optional[Tuple[str, float]]:
    """
    Find the option most similar to `value`.

    Args:
        value: Input value
        options: Candidate options; the earliest wins ties
        threshold: Minimum score for a match

    Returns:
        Tuple of (option, score), or None when no option reaches the threshold
    """
    best: Optional[str] = None
    best_score = 0.0
    for option in options:
        score = string_similarity(value, option)
        if score > best_score:
            best, best_score = option, score

    if best is not None and best_score >= threshold:
        return best, best_score
    return None


def _infer_type(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        for prop_type in ENUM_TYPES:
            if prop_type in value:
                return prop_type
        return None
    if isinstance(value, list):
        return "multi_select"
    if isinstance(value, str):
        return "select"
    return None


def _extract_names(value: Any, prop_type: str) -> Optional[List[str]]:
    """Pull the option names out of a property value, None for unrecognized shapes."""
    if isinstance(value, dict) and prop_type in value:
        value = value[prop_type]

    if prop_type == "multi_select":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return None
        names = []
        for item in value:
            name = item.get("name") if isinstance(item, dict) else item
            if not isinstance(name, str):
                return None
            names.append(name)
        return names

    name = value.get("name") if isinstance(value, dict) else value
    return [name] if isinstance(name, str) and name else None


def _rebuild(value: Any, prop_type: str, names: List[str]) -> Any:
    """Put resolved names back into the shape `value` came in."""
    wrapped = isinstance(value, dict) and prop_type in value
    inner = value[prop_type] if wrapped else value

    if prop_type == "multi_select":
        if isinstance(inner, list) and inner and isinstance(inner[0], dict):
            rebuilt: Any = [{"name": name} for name in names]
        else:
            rebuilt = list(names)
    else:
        rebuilt = {"name": names[0]} if isinstance(inner, dict) else names[0]

    return {prop_type: rebuilt} if wrapped else rebuilt


class FuzzyResolution(BaseModel):
    """
    Result of resolving a set of property values.
    """

    resolved: Dict[str, Any] = Field(default_factory=dict, description="Properties with substitutions applied")
    warnings: List[str] = Field(default_factory=list, description="One line per substitution or miss")
    matches: List[FuzzyMatchResult] = Field(default_factory=list, description="Per-value match details")


class FuzzyPropertyResolver:
    """
    Resolves enumerated property values against a schema's options.
    """

    def __init__(self, threshold: Optional[float] = None):
        """
        Initialize the resolver.

        Args:
            threshold: Minimum similarity for a substitution (defaults to config value)
        """
        self.threshold = config.fuzzy_threshold if threshold is None else threshold

    def resolve(self, properties: Dict[str, Any],
                schema: Dict[str, Dict[str, Any]]) -> FuzzyResolution:
        """
        Resolve property values against a normalized schema.

        Args:
            properties: Property name -> supplied value
            schema: Property name -> {"type", "options"}; a missing type is
                inferred from the value

        Returns:
            FuzzyResolution with the resolved properties and warnings
        """
        resolution = FuzzyResolution(resolved=dict(properties))

        for name, value in properties.items():
            definition = schema.get(name)
            if definition is None:
                continue

            prop_type = definition.get("type") or _infer_type(value)
            if prop_type not in ENUM_TYPES:
                continue

            options = list(definition.get("options") or [])
            if not options:
                continue

            names = _extract_names(value, prop_type)
            if names is None:
                continue

            resolved_names = [self._resolve_value(name, prop_type, item, options, resolution)
                              for item in names]
            if resolved_names != names:
                resolution.resolved[name] = _rebuild(value, prop_type, resolved_names)

        if resolution.warnings:
            logging.info(f"Fuzzy matching produced {len(resolution.warnings)} warnings")
        return resolution

    def _resolve_value(self, prop_name: str, prop_type: str, value: str,
                       options: List[str], resolution: FuzzyResolution) -> str:
        if value in options:
            return value

        label = TYPE_LABELS[prop_type]
        match = find_best_match(value, options, self.threshold)

        if match is None:
            resolution.warnings.append(f'{label} "{prop_name}": "{value}" - no close match found')
            resolution.matches.append(FuzzyMatchResult(property_name=prop_name, input_value=value))
            return value

        option, score = match
        percent = int(score * 100 + 0.5)
        resolution.warnings.append(f'{label} "{prop_name}": "{value}" → "{option}" ({percent}% match)')
        resolution.matches.append(FuzzyMatchResult(
            property_name=prop_name,
            input_value=value,
            resolved_value=option,
            score=score,
            matched=True,
        ))
        return option

    def resolve_with_store(self, store: BlockStore, source_id: str,
                           properties: Dict[str, Any]) -> FuzzyResolution:
        """
        Resolve property values against a data source fetched from the store.

        A schema that cannot be fetched leaves the properties unchanged with
        a single warning.
        """
        try:
            schema = store.fetch_schema(source_id)
        except StoreError as e:
            logging.warning(f"Could not fetch schema for {source_id}: {e.message}")
            return FuzzyResolution(
                resolved=dict(properties),
                warnings=[f"Could not fetch database schema for fuzzy matching: {e.message}"],
            )
        return self.resolve(properties, schema)


# Global resolver instance
fuzzy_resolver = FuzzyPropertyResolver()
