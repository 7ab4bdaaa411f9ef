"""Tests for the options-to-arguments encoder.

These tests define the contract for how option mappings become argv tokens:
one rule per value kind, prefixing, flat-mapping expansion and validation.
"""

import pytest
from pydantic import SecretStr

from dockertoolbox.codec.args import (
    OptionKind,
    camel_to_flag,
    option_kind,
    options_to_args,
    repeat_flag,
    secret_flags,
    snake_to_camel,
)
from dockertoolbox.errors import OptionsEncodingError


class TestFlagNames:
    def test_camel_case_is_hyphenated(self):
        assert camel_to_flag("testOption") == "--test-option"

    def test_single_word(self):
        assert camel_to_flag("pull") == "--pull"

    def test_prefix_inserted_after_dashes(self):
        assert camel_to_flag("testNumber", "test-prefix-") == "--test-prefix-test-number"

    def test_consecutive_capitals(self):
        assert camel_to_flag("sshKeyPath") == "--ssh-key-path"

    def test_snake_to_camel(self):
        assert snake_to_camel("force_rm") == "forceRm"
        assert snake_to_camel("pull") == "pull"

    def test_snake_to_camel_keeps_digits_in_segment(self):
        assert snake_to_camel("boot2docker_url") == "boot2dockerUrl"
        assert camel_to_flag(snake_to_camel("boot2docker_url")) == "--boot2docker-url"


class TestOptionKind:
    """Each value is classified once into a closed set of kinds."""

    def test_bool_is_flag_not_number(self):
        assert option_kind(True) is OptionKind.FLAG
        assert option_kind(False) is OptionKind.FLAG

    def test_numbers(self):
        assert option_kind(0) is OptionKind.NUMBER
        assert option_kind(1.5) is OptionKind.NUMBER

    def test_other_kinds(self):
        assert option_kind(None) is OptionKind.ABSENT
        assert option_kind("x") is OptionKind.TEXT
        assert option_kind(["a"]) is OptionKind.SEQUENCE
        assert option_kind(("a",)) is OptionKind.SEQUENCE
        assert option_kind({"a": 1}) is OptionKind.MAPPING

    def test_unsupported_type_raises(self):
        with pytest.raises(OptionsEncodingError):
            option_kind(object())


class TestOptionsToArgs:
    def test_false_does_not_add_arg(self):
        assert options_to_args({"testOption": False}) == []

    def test_true_adds_arg(self):
        assert options_to_args({"testOption": True}) == ["--test-option"]

    def test_numbers_are_converted_to_strings(self):
        assert options_to_args({"testOption": 42}) == ["--test-option", "42"]

    def test_zero_is_still_emitted(self):
        assert options_to_args({"timeout": 0}) == ["--timeout", "0"]

    def test_integral_float_has_no_fraction(self):
        assert options_to_args({"spotPrice": 2.0}) == ["--spot-price", "2"]
        assert options_to_args({"spotPrice": 0.25}) == ["--spot-price", "0.25"]

    def test_strings_with_spaces_are_wrapped_in_quotes(self):
        args = options_to_args({"testOption": "string with spaces"})
        assert args == ["--test-option", '"string with spaces"']

    def test_strings_without_spaces_are_not_wrapped(self):
        args = options_to_args({"testOption": "stringwithnowhitespacecharacters"})
        assert args == ["--test-option", "stringwithnowhitespacecharacters"]

    def test_tab_counts_as_whitespace(self):
        assert options_to_args({"testOption": "a\tb"}) == ["--test-option", '"a\tb"']

    def test_arrays_to_comma_separated_strings(self):
        args = options_to_args({"testOption": ["hello", "world", "how", "are", "you"]})
        assert args == ["--test-option", "hello,world,how,are,you"]

    def test_array_of_numbers(self):
        assert options_to_args({"ports": [80, 443]}) == ["--ports", "80,443"]

    def test_array_elements_are_not_escaped(self):
        """Known limitation: elements with commas or spaces are joined as-is."""
        args = options_to_args({"testOption": ["a b", "c,d"]})
        assert args == ["--test-option", "a b,c,d"]

    def test_none_empty_string_and_empty_array_add_nothing(self):
        assert options_to_args({"a": None, "b": "", "c": [], "d": {}, "e": False}) == []

    def test_empty_or_missing_mapping(self):
        assert options_to_args({}) == []
        assert options_to_args(None) == []

    def test_preserves_insertion_order(self):
        args = options_to_args({"zeta": True, "alpha": 1, "mid": "x"})
        assert args == ["--zeta", "--alpha", "1", "--mid", "x"]

    def test_is_deterministic(self):
        options = {"buildArg": {"A": "1", "B": 2}, "pull": True, "memory": "1g"}
        assert options_to_args(options) == options_to_args(options)

    def test_prefixes_arguments(self):
        args = options_to_args(
            {
                "testNumber": 10,
                "testString": "hello",
                "testArray": ["a", "b", "c"],
                "testBool": True,
                "testObject": {"KEY": "VALUE"},
            },
            prefix="test-prefix-",
        )
        assert args == [
            "--test-prefix-test-number", "10",
            "--test-prefix-test-string", "hello",
            "--test-prefix-test-array", "a,b,c",
            "--test-prefix-test-bool",
            "--test-prefix-test-object", "KEY=VALUE",
        ]  # fmt: skip

    def test_unsupported_value_raises(self):
        with pytest.raises(OptionsEncodingError):
            options_to_args({"when": object()})


class TestFlatMappings:
    """Mappings repeat the flag with KEY=VALUE as the value."""

    def test_objects_repeat_arg_with_key_value(self):
        args = options_to_args(
            {
                "buildArg": {
                    "KEY": "VALUE",
                    "something": "else",
                    "answer_to_life": 42,
                    "multipleValues": ["a", "b", "c"],
                    "enableThing": True,
                    "enableOtherThing": False,
                }
            }
        )
        assert args == [
            "--build-arg", "KEY=VALUE",
            "--build-arg", "something=else",
            "--build-arg", "answer_to_life=42",
            "--build-arg", "multipleValues=a,b,c",
            "--build-arg", "enableThing=true",
            "--build-arg", "enableOtherThing=false",
        ]  # fmt: skip

    def test_inner_keys_are_not_hyphenated(self):
        assert options_to_args({"label": {"camelKey": "v"}}) == ["--label", "camelKey=v"]

    @pytest.mark.parametrize(
        "mapping",
        [
            {"KEY": "VALUE VALUE VALUE"},
            {"KEY KEY KEY": "VALUE"},
            {"KEY KEY KEY": "VALUE VALUE VALUE"},
        ],
    )
    def test_whitespace_in_key_or_value_raises(self, mapping):
        with pytest.raises(OptionsEncodingError, match="whitespace"):
            options_to_args({"whatArg": mapping})

    def test_whitespace_in_array_element_raises(self):
        with pytest.raises(OptionsEncodingError, match="whitespace"):
            options_to_args({"whatArg": {"KEY": ["ok", "not ok"]}})

    def test_mapping_inside_array_raises(self):
        with pytest.raises(OptionsEncodingError):
            options_to_args({"whatArg": {"KEY": ["ok", {"nested": 1}]}})

    def test_nested_mapping_raises(self):
        with pytest.raises(OptionsEncodingError):
            options_to_args({"whatArg": {"KEY": {"nested": "value"}}})

    def test_error_prevents_all_output(self):
        """A later invalid entry means no tokens at all, not a partial list."""
        with pytest.raises(OptionsEncodingError):
            options_to_args({"pull": True, "buildArg": {"OK": "1", "BAD": "a b"}})


class TestRepeatFlag:
    def test_sequence_repeats_flag_per_element(self):
        assert repeat_flag("-p", ["8080:80", 5432]) == ["-p", "8080:80", "-p", "5432"]

    def test_mapping_renders_pairs(self):
        assert repeat_flag("-e", {"A": "1", "B": True}) == ["-e", "A=1", "-e", "B=true"]

    def test_scalar_yields_single_pair(self):
        assert repeat_flag("--azure-open-port", 80) == ["--azure-open-port", "80"]

    def test_none_yields_nothing(self):
        assert repeat_flag("-e", None) == []

    def test_mapping_whitespace_raises(self):
        with pytest.raises(OptionsEncodingError):
            repeat_flag("-e", {"A": "x y"})


class TestSecrets:
    """SecretStr values are unwrapped into argv and reported as secret flags."""

    def test_secret_kind(self):
        assert option_kind(SecretStr("dop_v1_abc")) is OptionKind.SECRET

    def test_secret_is_unwrapped_into_args(self):
        args = options_to_args({"accessToken": SecretStr("dop_v1_abc")}, prefix="digitalocean-")
        assert args == ["--digitalocean-access-token", "dop_v1_abc"]

    def test_empty_secret_adds_nothing(self):
        assert options_to_args({"password": SecretStr("")}) == []

    def test_secret_flags_names_only_secret_values(self):
        options = {"accessToken": SecretStr("dop_v1_abc"), "region": "nyc1", "ipv6": True}
        flags = secret_flags(options, prefix="digitalocean-")
        assert flags == frozenset({"--digitalocean-access-token"})

    def test_secret_flags_of_nothing(self):
        assert secret_flags(None) == frozenset()
        assert secret_flags({"region": "nyc1"}) == frozenset()
