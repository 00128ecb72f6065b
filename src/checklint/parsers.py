# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers that convert lint tool text output into :class:`Diagnostic` instances.

Each supported output dialect is described by a :class:`DialectRule`. Rules are
evaluated in order for every line and the first rule that matches wins, so
adding a new linter format means appending a rule rather than another branch.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Final

from pydantic import ValidationError

from .models import Diagnostic
from .severity import Severity, severity_from_label, severity_from_text

DiagnosticBuilder = Callable[[re.Match[str], str], Diagnostic]
LineGuard = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class DialectRule:
    """Describe one line-oriented lint output dialect.

    Attributes:
        name: Identifier used in debugging output and tests.
        pattern: Compiled regex matched against the raw line.
        build: Callable converting the match (and raw line) into a diagnostic.
        guard: Optional predicate the raw line must satisfy before matching.
    """

    name: str
    pattern: re.Pattern[str]
    build: DiagnosticBuilder
    guard: LineGuard | None = None

    def match(self, line: str) -> re.Match[str] | None:
        """Return the match for ``line`` when the rule applies to it."""

        if self.guard is not None and not self.guard(line):
            return None
        return self.pattern.match(line)


# path:line:col: severity message [rule]
_COMMON_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+):\s*(?P<severity>error|warning)\s+"
    r"(?P<message>.+?)(?:\s+\[(?P<rule>.+?)\])?$",
    re.IGNORECASE,
)
# path:line:col group/rule SEVERITY message
_GROUPED_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+)\s+(?P<rule>[\w-]+(?:/[\w-]+)+)\s+"
    r"(?P<severity>ERROR|WARNING|WARN)\s+(?P<message>.+)$",
    re.IGNORECASE,
)
# path:line:col: message
_GENERIC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<col>\d+):\s*(?P<message>.+)$",
)


def _build_common(match: re.Match[str], _line: str) -> Diagnostic:
    return Diagnostic(
        file=match.group("file"),
        line=int(match.group("line")),
        column=int(match.group("col")),
        severity=Severity(match.group("severity").lower()),
        message=match.group("message").strip(),
        rule=match.group("rule"),
    )


def _build_grouped(match: re.Match[str], _line: str) -> Diagnostic:
    return Diagnostic(
        file=match.group("file"),
        line=int(match.group("line")),
        column=int(match.group("col")),
        severity=severity_from_label(match.group("severity")),
        message=match.group("message").strip(),
        rule=match.group("rule"),
    )


def _build_generic(match: re.Match[str], line: str) -> Diagnostic:
    return Diagnostic(
        file=match.group("file"),
        line=int(match.group("line")),
        column=int(match.group("col")),
        severity=severity_from_text(line),
        message=match.group("message").strip(),
    )


def _not_indented(line: str) -> bool:
    # Continuation text of multi-line messages is indented.
    return not line[:1].isspace()


COMMON_DIALECT: Final[DialectRule] = DialectRule("common", _COMMON_PATTERN, _build_common)
GROUPED_RULE_DIALECT: Final[DialectRule] = DialectRule("grouped-rule", _GROUPED_PATTERN, _build_grouped)
GENERIC_DIALECT: Final[DialectRule] = DialectRule("generic", _GENERIC_PATTERN, _build_generic, guard=_not_indented)

DEFAULT_DIALECTS: Final[tuple[DialectRule, ...]] = (
    COMMON_DIALECT,
    GROUPED_RULE_DIALECT,
    GENERIC_DIALECT,
)


def match_line(line: str, rules: Sequence[DialectRule] = DEFAULT_DIALECTS) -> tuple[DialectRule, re.Match[str]] | None:
    """Return the first rule (and its match) accepting ``line``.

    Args:
        line: Raw output line, including any leading whitespace.
        rules: Ordered dialect rules to evaluate.

    Returns:
        tuple[DialectRule, re.Match[str]] | None: Winning rule and match, or
        ``None`` when no dialect recognises the line.
    """

    for rule in rules:
        match = rule.match(line)
        if match:
            return rule, match
    return None


def iter_dialect_matches(
    lines: Iterable[str],
    rules: Sequence[DialectRule] = DEFAULT_DIALECTS,
) -> Iterator[tuple[DialectRule, re.Match[str], str]]:
    """Yield ``(rule, match, line)`` for every line recognised by ``rules``.

    Blank lines, banners and summaries simply produce no match and are skipped.
    """

    for line in lines:
        if not line.strip():
            continue
        hit = match_line(line, rules)
        if hit is not None:
            rule, match = hit
            yield rule, match, line


def parse_lines(
    lines: Iterable[str],
    rules: Sequence[DialectRule] = DEFAULT_DIALECTS,
) -> list[Diagnostic]:
    """Convert recognised ``lines`` into diagnostics preserving input order.

    Lines whose line or column number is not a positive integer are dropped.
    """

    results: list[Diagnostic] = []
    for rule, match, line in iter_dialect_matches(lines, rules):
        try:
            results.append(rule.build(match, line))
        except (ValidationError, ValueError):
            continue
    return results


def parse_lint_output(raw_output: str, rules: Sequence[DialectRule] = DEFAULT_DIALECTS) -> list[Diagnostic]:
    """Parse the combined stdout/stderr text of a lint command.

    Args:
        raw_output: Text emitted by the lint tool.
        rules: Ordered dialect rules; defaults to :data:`DEFAULT_DIALECTS`.

    Returns:
        list[Diagnostic]: One diagnostic per recognised line, in input order.
    """

    if not raw_output:
        return []
    return parse_lines(raw_output.splitlines(), rules)


__all__ = [
    "COMMON_DIALECT",
    "DEFAULT_DIALECTS",
    "DialectRule",
    "GENERIC_DIALECT",
    "GROUPED_RULE_DIALECT",
    "iter_dialect_matches",
    "match_line",
    "parse_lines",
    "parse_lint_output",
]
