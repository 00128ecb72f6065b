# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for lint output dialect parsing."""

from __future__ import annotations

from checklint.models import Diagnostic
from checklint.parsers import (
    COMMON_DIALECT,
    GENERIC_DIALECT,
    GROUPED_RULE_DIALECT,
    iter_dialect_matches,
    match_line,
    parse_lint_output,
)
from checklint.severity import Severity


def test_parse_common_dialect_with_rule() -> None:
    diagnostics = parse_lint_output("src/a.ts:10:5: error 'x' is never used [no-unused-vars]")

    assert diagnostics == [
        Diagnostic(
            file="src/a.ts",
            line=10,
            column=5,
            severity=Severity.ERROR,
            message="'x' is never used",
            rule="no-unused-vars",
        )
    ]


def test_parse_common_dialect_without_rule_leaves_rule_unset() -> None:
    (diagnostic,) = parse_lint_output("lib/util.js:3:1: Warning Unexpected console statement")

    assert diagnostic.severity is Severity.WARNING
    assert diagnostic.message == "Unexpected console statement"
    assert diagnostic.rule is None


def test_parse_grouped_rule_dialect() -> None:
    output = "\n".join(
        [
            "src/app.tsx:4:12 lint/suspicious/noExplicitAny ERROR Unexpected any.",
            "src/app.tsx:9:2 style/useConst WARN Use const instead.",
        ]
    )

    first, second = parse_lint_output(output)

    assert first.rule == "lint/suspicious/noExplicitAny"
    assert first.severity is Severity.ERROR
    assert first.message == "Unexpected any."
    assert (second.line, second.column) == (9, 2)
    assert second.rule == "style/useConst"
    assert second.severity is Severity.WARNING


def test_generic_dialect_infers_severity_from_text() -> None:
    output = "\n".join(
        [
            "pkg/main.ts:7:3: Parse error: unexpected token",
            "pkg/main.ts:8:1: trailing whitespace",
        ]
    )

    first, second = parse_lint_output(output)

    assert first.severity is Severity.ERROR
    assert first.message == "Parse error: unexpected token"
    assert first.rule is None
    assert second.severity is Severity.WARNING


def test_generic_dialect_skips_indented_lines() -> None:
    assert parse_lint_output("    src/a.ts:1:1: continuation of a previous message") == []


def test_first_matching_dialect_wins() -> None:
    hit = match_line("src/a.ts:1:2: error boom [rule]")

    assert hit is not None
    rule, _match = hit
    assert rule is COMMON_DIALECT


def test_grouped_line_is_not_claimed_by_generic_dialect() -> None:
    hit = match_line("src/a.ts:1:2 group/rule ERROR boom")

    assert hit is not None
    assert hit[0] is GROUPED_RULE_DIALECT


def test_unrecognised_lines_are_dropped_and_order_is_kept() -> None:
    output = "\n".join(
        [
            "$ eslint .",
            "b.ts:2:1: error second [r2]",
            "",
            "a.ts:1:1: error first [r1]",
            "b.ts:2:1: error second [r2]",
            "✖ 3 problems (3 errors, 0 warnings)",
        ]
    )

    diagnostics = parse_lint_output(output)

    assert [d.file for d in diagnostics] == ["b.ts", "a.ts", "b.ts"]


def test_zero_line_numbers_are_skipped() -> None:
    output = "src/a.ts:0:4: error impossible location\nsrc/a.ts:2:4: error real location"

    diagnostics = parse_lint_output(output)

    assert [d.line for d in diagnostics] == [2]


def test_empty_output_yields_no_diagnostics() -> None:
    assert parse_lint_output("") == []


def test_iter_dialect_matches_with_custom_rule_set() -> None:
    lines = ["src/a.ts:1:1: error boom [r]", "src/b.ts:2:2: something odd"]

    matches = list(iter_dialect_matches(lines, (GENERIC_DIALECT,)))

    assert [rule.name for rule, _match, _line in matches] == ["generic", "generic"]
