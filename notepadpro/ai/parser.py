"""Tolerant extraction of labelled sections from free-form model output.

Models are asked to answer in a fixed layout such as::

    ENHANCED_TEXT:
    <text>

    EXPLANATION:
    <text>

but frequently drift from it. :class:`ResponseParser` works through three
tiers until the primary section has a value:

1. ``LABEL:`` markers, each section running up to the next known label.
2. A line scan that accepts label variants (``Enhanced text:``,
   ``**Enhanced Text**:``) and collects the lines that follow.
3. The whole response becomes the primary section and the remaining empty
   sections receive their fallback text.

Parsing never raises. Every schema section is present in the result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

__all__ = [
    "ELLIPSIS",
    "SectionSpec",
    "SectionSchema",
    "ResponseParser",
    "ENHANCE_SCHEMA",
    "GRAMMAR_SCHEMA",
    "parse_response",
]

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


@dataclass(frozen=True)
class SectionSpec:
    """One labelled region of a model response."""

    key: str
    label: str
    default: str
    fallback: str | None = None
    max_length: int | None = None

    def line_pattern(self) -> re.Pattern[str]:
        return _variant_pattern(self.label)


@dataclass(frozen=True)
class SectionSchema:
    """Ordered sections expected in a response; the first is the primary one."""

    sections: tuple[SectionSpec, ...]
    terminators: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.sections:
            raise ValueError("A section schema needs at least one section.")

    @property
    def primary(self) -> SectionSpec:
        return self.sections[0]

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(section.key for section in self.sections)


def _variant_pattern(label: str) -> re.Pattern[str]:
    # ENHANCED_TEXT also matches "Enhanced text:" and "**Enhanced Text**:"
    words = [re.escape(word) for word in re.split(r"[\s_]+", label.strip()) if word]
    return re.compile(r"[*#]*\s*" + r"[\s_]+".join(words) + r"[*\s]*:", re.IGNORECASE)


ENHANCE_SCHEMA = SectionSchema(
    sections=(
        SectionSpec(
            key="enhanced",
            label="ENHANCED_TEXT",
            default="No enhancement generated",
        ),
        SectionSpec(
            key="explanation",
            label="EXPLANATION",
            default="Text has been professionally enhanced for better clarity and impact.",
            fallback="Text has been enhanced for better clarity, grammar, and professional polish.",
            max_length=200,
        ),
    ),
    terminators=("QUALITY STANDARDS",),
)

GRAMMAR_SCHEMA = SectionSchema(
    sections=(
        SectionSpec(
            key="corrected",
            label="CORRECTED_TEXT",
            default="No corrections generated",
        ),
        SectionSpec(
            key="errors",
            label="ERRORS_FOUND",
            default="No specific errors identified",
            fallback="Grammar analysis completed.",
        ),
        SectionSpec(
            key="improvements",
            label="IMPROVEMENTS",
            default="Grammar check completed",
            fallback="Text has been reviewed for grammar and style improvements.",
        ),
        SectionSpec(
            key="tips",
            label="GRAMMAR_TIPS",
            default="Review your text for clarity and consistency.",
            fallback="Consider reviewing your text for clarity and consistency.",
        ),
    ),
)


class ResponseParser:
    """Extract the sections of ``schema`` from raw model output."""

    def __init__(self, schema: SectionSchema) -> None:
        self._schema = schema
        self._label_patterns = {
            section.key: self._build_label_pattern(section) for section in schema.sections
        }
        self._line_patterns = {section.key: section.line_pattern() for section in schema.sections}
        self._terminator_patterns = [_variant_pattern(term) for term in schema.terminators]

    @property
    def schema(self) -> SectionSchema:
        return self._schema

    def parse(self, raw_text: Any) -> dict[str, str]:
        """Return a mapping of section key to extracted text."""

        text = raw_text if isinstance(raw_text, str) else ""
        try:
            values = self._extract(text)
        except Exception:  # noqa: BLE001 - degrade to the raw text
            logger.exception("Failed to parse model response")
            values = self._raw_fallback(text, dict.fromkeys(self._schema.keys, ""))
        return self._finalise(values)

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------
    def _extract(self, text: str) -> dict[str, str]:
        primary = self._schema.primary.key

        values = {key: self._match_label(key, text) for key in self._schema.keys}
        if values[primary]:
            logger.debug("Parsed model response from section labels")
            return values

        for key in self._schema.keys:
            if not values[key]:
                values[key] = self._scan_lines(key, text)
        if values[primary]:
            logger.debug("Parsed model response with the line scanner")
            return values

        return self._raw_fallback(text, values)

    def _match_label(self, key: str, text: str) -> str:
        match = self._label_patterns[key].search(text)
        return match.group(1).strip() if match else ""

    def _scan_lines(self, key: str, text: str) -> str:
        opener = self._line_patterns[key]
        closers = [pattern for other, pattern in self._line_patterns.items() if other != key]
        closers.extend(self._terminator_patterns)

        captured: list[str] = []
        capturing = False
        for line in text.splitlines():
            if not capturing:
                match = opener.search(line)
                if match is None:
                    continue
                capturing = True
                remainder = line[match.end():].strip().strip("*").strip()
                if remainder:
                    captured.append(remainder)
                continue
            if any(pattern.search(line) for pattern in closers):
                break
            if line.strip():
                captured.append(line.rstrip())

        return "\n".join(captured).strip()

    def _raw_fallback(self, text: str, values: dict[str, str]) -> dict[str, str]:
        cleaned = text.strip()
        if not cleaned:
            return values
        logger.warning("Model response had no recognisable sections, using raw text")
        values[self._schema.primary.key] = cleaned
        for section in self._schema.sections[1:]:
            if not values.get(section.key) and section.fallback:
                values[section.key] = section.fallback
        return values

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _finalise(self, values: dict[str, str]) -> dict[str, str]:
        result: dict[str, str] = {}
        for section in self._schema.sections:
            value = values.get(section.key) or ""
            if section.max_length is not None and len(value) > section.max_length:
                value = value[: section.max_length] + ELLIPSIS
            result[section.key] = value or section.default
        return result

    def _build_label_pattern(self, section: SectionSpec) -> re.Pattern[str]:
        stops = [other.label for other in self._schema.sections if other.key != section.key]
        stops.extend(self._schema.terminators)
        # Exact labels stop a section anywhere, spelling variants only at a line start
        exact = [re.escape(stop) + ":" for stop in stops]
        variants = ["^" + _variant_pattern(stop).pattern for stop in stops]
        lookahead = "|".join(exact + variants)
        end = rf"(?:(?={lookahead})|\Z)" if lookahead else r"\Z"
        return re.compile(
            re.escape(section.label) + r":\s*(.*?)" + end,
            re.IGNORECASE | re.DOTALL | re.MULTILINE,
        )


def parse_response(raw_text: Any, schema: SectionSchema) -> dict[str, str]:
    """Parse ``raw_text`` against ``schema`` with a throwaway parser."""

    return ResponseParser(schema).parse(raw_text)
