"""Unit tests for the union-typed fields."""

import pytest

from rivergen.errors import InvalidVariantShape
from rivergen.variants import Matrix, Secrets, StringOrInt


class TestStringOrInt:
    """String-or-integer scalars."""

    def test_integer_encodes_as_bare_number(self):
        assert StringOrInt(int_value=42).encode() == 42

    def test_string_encodes_as_string(self):
        assert StringOrInt(string_value="42").encode() == "42"

    def test_quoted_number_decodes_as_string(self):
        """A quoted "42" stays a string, it is not promoted to an integer."""
        value = StringOrInt.decode("42")
        assert value.string_value == "42"
        assert value.int_value is None
        assert not value.is_int

    def test_bare_number_decodes_as_integer(self):
        value = StringOrInt.decode(7)
        assert value.int_value == 7
        assert value.is_int

    def test_unset_encodes_as_null(self):
        assert StringOrInt().encode() is None

    @pytest.mark.parametrize("data", [None, True, 1.5, [1], {"a": 1}])
    def test_other_shapes_are_rejected(self, data):
        with pytest.raises(InvalidVariantShape):
            StringOrInt.decode(data)

    def test_both_values_cannot_be_held(self):
        with pytest.raises(InvalidVariantShape):
            StringOrInt(string_value="a", int_value=1)


class TestSecrets:
    """Inherit-or-mapping secrets."""

    def test_inherit_encodes_boolean_shape(self):
        assert Secrets.inherit_all().encode() == {"inherit": True}

    def test_mapping_encodes_raw_mapping(self):
        secrets = Secrets.of({"TOKEN": "${{secrets.TOKEN}}"})
        assert secrets.encode() == {"TOKEN": "${{secrets.TOKEN}}"}

    @pytest.mark.parametrize(
        "secrets",
        [Secrets.inherit_all(), Secrets.of({"A": "b", "C": "d"}), Secrets()],
        ids=["inherit", "mapping", "empty"],
    )
    def test_round_trip(self, secrets):
        assert Secrets.decode(secrets.encode()) == secrets

    def test_vendor_shorthand_decodes_as_inherit(self):
        assert Secrets.decode("inherit") == Secrets.inherit_all()

    def test_inherit_key_with_string_value_is_a_mapping(self):
        """Only a boolean under `inherit` selects the inherit shape."""
        secrets = Secrets.decode({"inherit": "yes"})
        assert not secrets.inherit
        assert secrets.mapping == {"inherit": "yes"}

    @pytest.mark.parametrize("data", ["nope", 3, ["a"], {"A": 1}, {"inherit": True, "A": 1}])
    def test_invalid_shapes(self, data):
        with pytest.raises(InvalidVariantShape):
            Secrets.decode(data)

    def test_inherit_and_mapping_together_is_rejected(self):
        with pytest.raises(InvalidVariantShape):
            Secrets(inherit=True, mapping={"A": "b"})


class TestMatrix:
    """Matrix with reserved include/exclude keys."""

    def test_encode_omits_empty_include_and_exclude(self):
        matrix = Matrix(dimensions={"os": ["ubuntu-latest", "macos-latest"], "py": [3, "3.12"]})
        encoded = matrix.encode()
        assert encoded == {"os": ["ubuntu-latest", "macos-latest"], "py": [3, "3.12"]}
        assert "include" not in encoded
        assert "exclude" not in encoded

    def test_encode_keeps_non_empty_include_and_exclude(self):
        matrix = Matrix(
            dimensions={"os": ["linux"]},
            include=[{"os": "windows", "experimental": 1}],
            exclude=[{"os": "linux"}],
        )
        assert matrix.encode() == {
            "os": ["linux"],
            "include": [{"experimental": 1, "os": "windows"}],
            "exclude": [{"os": "linux"}],
        }

    @pytest.mark.parametrize("matrix", [
        Matrix(),
        Matrix(dimensions={"node": [18, 20], "os": ["linux"]}, include=[{"node": 22, "os": "linux"}]),
        Matrix(dimensions={"os": ["linux", "macos"]}, exclude=[{"os": "macos"}]),
        Matrix(exclude=[{"os": "macos"}]),
        Matrix(include=[{"os": "windows", "experimental": 1}]),
        Matrix(dimensions={"os": []}),
    ], ids=["empty", "include-only", "exclude-only", "bare-exclude", "bare-include", "empty-dimension"])
    def test_round_trip(self, matrix):
        assert Matrix.decode(matrix.encode()) == matrix

    def test_empty_combination_lists_are_omitted(self):
        assert Matrix(dimensions={"os": []}).encode() == {"os": []}
        assert Matrix().encode() == {}

    def test_decode_partitions_reserved_keys(self):
        matrix = Matrix.decode({
            "exclude": [{"a": 1}],
            "a": [1, 2],
            "include": [{"a": 3}],
        })
        assert list(matrix.dimensions) == ["a"]
        assert matrix.include == [{"a": StringOrInt(int_value=3)}]
        assert matrix.exclude == [{"a": StringOrInt(int_value=1)}]

    def test_decode_reports_first_bad_key_in_sorted_order(self):
        with pytest.raises(InvalidVariantShape) as exc_info:
            Matrix.decode({"zeta": [1.5], "alpha": [True]})
        assert exc_info.value.variant == "matrix.alpha"

    def test_decode_rejects_non_list_dimension(self):
        with pytest.raises(InvalidVariantShape):
            Matrix.decode({"os": "linux"})

    def test_decode_rejects_non_mapping(self):
        with pytest.raises(InvalidVariantShape):
            Matrix.decode(["os"])

    @pytest.mark.parametrize("reserved", ["include", "exclude"])
    def test_reserved_dimension_name_is_rejected(self, reserved):
        with pytest.raises(InvalidVariantShape):
            Matrix(dimensions={reserved: ["a"]})
