"""
Unit tests for the label decision engine.
"""

import pytest

from decision import decide, label_matches, needs_labels, normalize_label
from rules import parse


@pytest.fixture
def rules():
    return parse(
        "docs: '**/*.md'\n"
        "backend:\n  - 'src/**/*.go'\n  - 'src/**/*.rs'\n"
        "frontend: 'web/**'\n"
        "ci: '.github/**'\n"
    )


class TestDecide:

    def test_single_string_rule(self):
        assert decide(["README.md"], parse("docs: '*.md'")) == {"docs"}

    def test_no_match_is_empty(self):
        backend = parse("backend: ['src/**/*.go', 'src/**/*.rs']")
        assert decide(["web/app.tsx"], backend) == set()

    def test_any_pattern_any_file(self, rules):
        changed = ["web/app.tsx", "src/core/lib.rs", "docs/guide.md"]
        assert decide(changed, rules) == {"docs", "backend", "frontend"}

    def test_dot_directory(self, rules):
        assert decide([".github/workflows/ci.yml"], rules) == {"ci"}

    def test_result_is_subset_of_rule_labels(self, rules):
        changed = ["a.md", "src/x.go", "web/i.ts", ".github/x", "other/thing.c"]
        assert decide(changed, rules) <= set(rules)

    def test_no_files(self, rules):
        assert decide([], rules) == set()

    def test_empty_rules(self):
        assert decide(["README.md"], parse("")) == set()

    def test_order_does_not_change_result(self, rules):
        changed = ["web/app.tsx", "src/core/lib.rs", "docs/guide.md"]
        assert decide(changed, rules) == decide(list(reversed(changed)), rules)

    def test_deterministic(self, rules):
        changed = ["src/main.go", "notes.txt"]
        assert decide(changed, rules) == decide(changed, rules) == {"backend"}

    def test_accepts_generator(self, rules):
        assert decide((f for f in ["README.md", "src/a.go"]), rules) == {"docs", "backend"}


class TestLabelMatches:

    def test_short_circuits(self):
        assert label_matches(["a.py", "b.md"], ["*.md", "[z-a]"]) is True

    def test_malformed_pattern_never_matches(self):
        assert label_matches(["b.py"], ["[z-a].py"]) is False


class TestNeedsLabels:

    def test_empty_decision_needs_nothing(self):
        assert needs_labels(set(), []) is False

    def test_missing_label(self):
        assert needs_labels({"docs"}, ["bug"]) is True

    def test_already_present(self):
        assert needs_labels({"docs"}, ["docs", "bug"]) is False

    def test_case_insensitive(self):
        assert needs_labels({"docs", "Backend"}, ["DOCS", "backend"]) is False

    def test_accent_insensitive(self):
        assert needs_labels({"documentacion"}, ["Documentación"]) is False

    def test_partial_subset_needs_write(self):
        assert needs_labels({"docs", "backend"}, ["docs"]) is True


class TestNormalizeLabel:

    @pytest.mark.parametrize("name,expected", [
        ("Docs", "docs"),
        ("Documentación", "documentacion"),
        ("STRASSE", "strasse"),
        ("Straße", "strasse"),
        ("área/UI", "area/ui"),
    ])
    def test_normalize(self, name, expected):
        assert normalize_label(name) == expected
