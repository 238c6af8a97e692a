import pytest

from knotcrypt.manifest import FilterRules
from knotcrypt.rules import RuleEngine, compile_glob, matches_wildcard


@pytest.mark.parametrize(
    "text, pattern, expected",
    [
        ("/project/build/x", "build/**", True),
        ("/project/build", "build/**", False),
        ("/project/a/b/c", "a/**/c", True),
        ("/project/a/b/c", "a/*/c", True),
        ("/project/a/b/d/c", "a/*/c", False),
        ("/project/abc", "a?c", True),
        ("/project/a/c", "a?c", False),
        ("C:\\work\\a\\c", "a?c", False),
        # unanchored: a match anywhere in the path counts
        ("/project/rebuild.txt", "build", True),
        ("/project/node_modules/pkg", "node_modules", True),
    ],
)
def test_matches_wildcard(text, pattern, expected):
    assert matches_wildcard(text, pattern) is expected


def test_literal_characters_are_escaped():
    assert matches_wildcard("/p/v1.0/x", "v1.0")
    assert not matches_wildcard("/p/v1x0/x", "v1.0")
    assert matches_wildcard("/p/(tmp)", "(tmp)")


def test_double_star_takes_precedence_over_star():
    assert compile_glob("**").pattern == ".*"
    assert compile_glob("a**b").search("a/x/y/b")


def test_skip_pattern_for_returns_first_match():
    engine = RuleEngine(FilterRules(skip_folders=("cache", "ca*")))
    assert engine.skip_pattern_for("/x/cache") == "cache"
    assert engine.skip_pattern_for("/x/car") == "ca*"
    assert engine.skip_pattern_for("/x/src") is None


def test_matches_extension_exact_and_case_sensitive():
    engine = RuleEngine(FilterRules(extensions=(".txt",)))
    assert engine.matches_extension("/a/report.txt")
    assert not engine.matches_extension("/a/report.TXT")
    assert not engine.matches_extension("/a/report.txt.bak")
    assert not engine.matches_extension("/a/txt")
    assert not engine.matches_extension("/a/report.pdf")
