"""Tests for typespec document parsing (mal._config).

Validates the dict → config type conversion.
"""

import pytest

from mal import (
    ConfigParseError,
    KeyedConfig,
    LiteralConfig,
    MatcherError,
    NamedConfig,
    NestedConfig,
    RegexConfig,
    TypeConfig,
    parse_typespec_config,
)


class TestParseShorthand:
    """Tests for bare-string nodes."""

    @pytest.mark.parametrize("name", ["Anything", "Nil", "Bool"])
    def test_named_variants(self, name: str) -> None:
        assert parse_typespec_config(name) == NamedConfig(variant=name)

    def test_type_name(self) -> None:
        assert parse_typespec_config("int") == TypeConfig(name="int")

    def test_empty_string(self) -> None:
        with pytest.raises(ConfigParseError, match="must not be empty"):
            parse_typespec_config("")


class TestParseVariants:
    """Tests for single-key dict nodes."""

    def test_named_with_null_payload(self) -> None:
        assert parse_typespec_config({"Nil": None}) == NamedConfig(variant="Nil")
        assert parse_typespec_config({"Bool": {}}) == NamedConfig(variant="Bool")

    def test_named_with_payload_rejected(self) -> None:
        with pytest.raises(ConfigParseError, match="takes no arguments"):
            parse_typespec_config({"Anything": 1})

    def test_only(self) -> None:
        assert parse_typespec_config({"Only": "str"}) == TypeConfig(name="str")

    def test_matching(self) -> None:
        assert parse_typespec_config({"Matching": "^a"}) == RegexConfig(pattern="^a")

    def test_value(self) -> None:
        config = parse_typespec_config({"Value": [1, 2]})
        assert config == LiteralConfig(variant="Value", value=[1, 2])

    def test_included_in(self) -> None:
        config = parse_typespec_config({"IncludedIn": [7, 5]})
        assert config == LiteralConfig(variant="IncludedIn", value=(7, 5))

    def test_covered_by(self) -> None:
        config = parse_typespec_config({"CoveredBy": [1, 4]})
        assert config == LiteralConfig(variant="CoveredBy", value=(1, 4))

    def test_covered_by_needs_two_bounds(self) -> None:
        with pytest.raises(ConfigParseError, match=r"\[low, high\]"):
            parse_typespec_config({"CoveredBy": [1, 2, 3]})

    def test_object_with(self) -> None:
        config = parse_typespec_config({"ObjectWith": ["upper", "lower"]})
        assert config == LiteralConfig(variant="ObjectWith", value=("upper", "lower"))

    def test_object_with_non_string_names(self) -> None:
        with pytest.raises(ConfigParseError, match="must all be strings"):
            parse_typespec_config({"ObjectWith": ["upper", 1]})

    def test_satisfying(self) -> None:
        config = parse_typespec_config({"Satisfying": "positive"})
        assert config == LiteralConfig(variant="Satisfying", value="positive")

    @pytest.mark.parametrize("variant", ["OfElements", "OfAtLeastElements", "OfAtMostElements"])
    def test_lengths(self, variant: str) -> None:
        assert parse_typespec_config({variant: 3}) == LiteralConfig(variant=variant, value=3)

    @pytest.mark.parametrize("bad", [-1, "3", True, 1.5])
    def test_length_must_be_non_negative_int(self, bad: object) -> None:
        with pytest.raises(ConfigParseError, match="non-negative int"):
            parse_typespec_config({"OfElements": bad})

    def test_array_of(self) -> None:
        config = parse_typespec_config({"ArrayOf": "int"})
        assert config == NestedConfig(variant="ArrayOf", members=(TypeConfig(name="int"),))

    def test_either(self) -> None:
        config = parse_typespec_config({"Either": ["int", "Nil"]})
        assert isinstance(config, NestedConfig)
        assert config.members == (TypeConfig(name="int"), NamedConfig(variant="Nil"))

    def test_either_needs_members(self) -> None:
        with pytest.raises(ConfigParseError, match="at least one member"):
            parse_typespec_config({"Either": []})

    def test_both_needs_a_list(self) -> None:
        with pytest.raises(ConfigParseError, match="takes a list"):
            parse_typespec_config({"Both": "int"})

    def test_hash_with_keeps_order(self) -> None:
        config = parse_typespec_config({"HashWith": {"b": "int", "a": {"Maybe": "str"}}})
        assert isinstance(config, KeyedConfig)
        assert [k for k, _ in config.entries] == ["b", "a"]
        assert config.entries[1][1] == NestedConfig(
            variant="Maybe", members=(TypeConfig(name="str"),)
        )

    def test_hash_needs_a_dict(self) -> None:
        with pytest.raises(ConfigParseError, match="dict of key"):
            parse_typespec_config({"HashOf": ["a"]})


class TestParseErrors:
    def test_not_a_dict_or_string(self) -> None:
        with pytest.raises(ConfigParseError, match="got int"):
            parse_typespec_config(5)

    def test_multiple_keys(self) -> None:
        with pytest.raises(ConfigParseError, match="exactly one key"):
            parse_typespec_config({"Only": "int", "Nil": None})

    def test_unknown_variant(self) -> None:
        with pytest.raises(ConfigParseError, match="unknown typespec variant 'Whatever'"):
            parse_typespec_config({"Whatever": 1})

    def test_nested_errors_surface(self) -> None:
        with pytest.raises(ConfigParseError):
            parse_typespec_config({"HashWith": {"a": {"ArrayOf": 5}}})

    def test_is_a_matcher_error(self) -> None:
        with pytest.raises(MatcherError):
            parse_typespec_config([])
