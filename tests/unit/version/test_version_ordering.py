"""Tests for release-aware version ordering."""
from __future__ import annotations

import pytest

from wildfly_tools.core.version import (
    ReleaseType,
    Version,
    compare_versions,
    parse_version,
    release_type,
    tokenize,
    version_key,
)


class TestTokenize:
    def test_splits_on_separators_and_digit_transitions(self) -> None:
        assert tokenize("1.0.0.Beta1") == (1, 0, 0, "beta", 1)

    def test_qualifiers_are_lowercased(self) -> None:
        assert tokenize("27.0.0.Final") == (27, 0, 0, "final")

    def test_dash_separator(self) -> None:
        assert tokenize("2.0-SNAPSHOT") == (2, 0, "snapshot")

    def test_empty_string_has_no_parts(self) -> None:
        assert tokenize("") == ()


class TestReleaseType:
    @pytest.mark.parametrize(
        "qualifier,expected",
        [
            ("SNAPSHOT", ReleaseType.SNAPSHOT),
            ("a", ReleaseType.ALPHA),
            ("Alpha", ReleaseType.ALPHA),
            ("b", ReleaseType.BETA),
            ("m", ReleaseType.MILESTONE),
            ("CR", ReleaseType.RELEASE_CANDIDATE),
            ("rc", ReleaseType.RELEASE_CANDIDATE),
            ("GA", ReleaseType.FINAL),
            ("", ReleaseType.FINAL),
        ],
    )
    def test_known_aliases(self, qualifier: str, expected: ReleaseType) -> None:
        assert release_type(qualifier) is expected

    def test_unknown_qualifier_is_unranked(self) -> None:
        assert release_type("redhat") is None


class TestCompareVersions:
    def test_final_equals_bare_version(self) -> None:
        assert compare_versions("1.0.0.Final", "1.0.0") == 0

    def test_ga_equals_final(self) -> None:
        assert compare_versions("1.0.0.GA", "1.0.0.Final") == 0

    def test_trailing_zero_parts_are_equal(self) -> None:
        assert compare_versions("1.0", "1.0.0") == 0

    def test_beta_is_lower_than_release(self) -> None:
        assert compare_versions("1.0.0.Beta1", "1.0.0") == -1
        assert compare_versions("1.0.0", "1.0.0.Beta1") == 1

    def test_numeric_parts_compare_as_integers(self) -> None:
        assert compare_versions("1.10.0", "1.9.0") == 1
        assert compare_versions("2.0.0", "1.9.9") == 1

    def test_missing_qualifier_counts_as_final(self) -> None:
        assert compare_versions("1.0", "1.0-beta") == 1
        assert compare_versions("1.0", "1.0.final") == 0

    def test_release_type_chain(self) -> None:
        chain = [
            "1.0.0-SNAPSHOT",
            "1.0.0.Alpha1",
            "1.0.0.Beta1",
            "1.0.0.M1",
            "1.0.0.CR1",
            "1.0.0.Final",
        ]
        for lower, higher in zip(chain, chain[1:]):
            assert compare_versions(lower, higher) == -1, (lower, higher)
            assert compare_versions(higher, lower) == 1, (higher, lower)

    def test_release_type_chain_is_transitive(self) -> None:
        chain = [
            "1.0.0-SNAPSHOT",
            "1.0.0.Alpha1",
            "1.0.0.Beta1",
            "1.0.0.M1",
            "1.0.0.CR1",
            "1.0.0.Final",
            "1.0.1",
        ]
        assert compare_versions("1.0.0-SNAPSHOT", "1.0.0.Final") == -1
        for i, lower in enumerate(chain):
            assert compare_versions(lower, lower) == 0, lower
            for higher in chain[i + 1 :]:
                assert compare_versions(lower, higher) == -1, (lower, higher)
                assert compare_versions(higher, lower) == 1, (higher, lower)

    def test_qualifier_number_breaks_ties(self) -> None:
        assert compare_versions("1.0.0.Beta2", "1.0.0.Beta10") == -1

    def test_numeric_part_beats_qualifier(self) -> None:
        assert compare_versions("1.0.1", "1.0.Final") == 1

    def test_unranked_sits_above_final(self) -> None:
        assert compare_versions("1.0.0.redhat", "1.0.0.Final") == 1
        assert compare_versions("1.0.0.Final", "1.0.0.redhat") == -1

    def test_unranked_sits_below_other_release_types(self) -> None:
        assert compare_versions("1.0.0.redhat", "1.0.0.Beta1") == -1
        assert compare_versions("1.0.0.CR1", "1.0.0.redhat") == 1

    def test_unranked_qualifiers_compare_alphabetically(self) -> None:
        assert compare_versions("1.0.0.abc", "1.0.0.xyz") == -1
        assert compare_versions("1.0.0.xyz", "1.0.0.xyz") == 0

    def test_is_antisymmetric(self) -> None:
        pairs = [("1.0", "2.0"), ("1.0.0.Alpha1", "1.0.0.Alpha2"), ("3.0.0.CR1", "3.0.0")]
        for left, right in pairs:
            assert compare_versions(left, right) == -compare_versions(right, left)


class TestVersion:
    def test_ordering_operators_use_release_semantics(self) -> None:
        beta = Version.parse("20.0.0.Beta1")
        final = Version.parse("20.0.0.Final")
        assert beta < final
        assert final > beta
        assert beta <= final
        assert final >= beta

    def test_equality_uses_raw_string(self) -> None:
        short = Version.parse("1.0")
        long = Version.parse("1.0.0")
        assert short != long
        assert not short < long
        assert short <= long and short >= long
        assert Version.parse("1.0") == Version.parse("1.0")
        assert hash(Version.parse("1.0")) == hash(Version.parse("1.0"))

    def test_str_returns_raw(self) -> None:
        assert str(Version.parse("26.1.3.Final")) == "26.1.3.Final"

    def test_comparison_with_other_types_is_unsupported(self) -> None:
        with pytest.raises(TypeError):
            Version.parse("1.0") < "2.0"  # type: ignore[operator]

    def test_parse_version_is_cached(self) -> None:
        assert parse_version("5.0.0") is parse_version("5.0.0")


def test_sorting_with_version_key() -> None:
    versions = ["2.0.0", "1.0.0.Final", "1.0.0.Beta2", "1.0.0-SNAPSHOT", "1.0.0.CR1", "1.1"]
    assert sorted(versions, key=version_key) == [
        "1.0.0-SNAPSHOT",
        "1.0.0.Beta2",
        "1.0.0.CR1",
        "1.0.0.Final",
        "1.1",
        "2.0.0",
    ]
