"""
Tests for input validation and normalization.
"""

import pytest

from opencheck.core.exceptions import ValidationError
from opencheck.core.validation import (
    encode_package_name_for_url,
    normalize_version_range,
    validate_package_name,
    validate_response_size,
)


class TestNormalizeVersionRange:
    """Tests for normalize_version_range."""

    @pytest.mark.parametrize(
        "declared,expected",
        [
            ("^1.3.0", "1.3.0"),
            ("~2.0.1", "2.0.1"),
            ("4.17.21", "4.17.21"),
            (">=1.2.0 <2.0.0", "1.2.0"),
            (">= 3.0.0", "3.0.0"),
            ("  ^5.0.0  ", "5.0.0"),
            ("latest", "latest"),
            ("1.x", "1.x"),
        ],
    )
    def test_normalize(self, declared, expected):
        assert normalize_version_range(declared) == expected

    @pytest.mark.parametrize("declared", ["", "   ", "^", ">=<"])
    def test_nothing_left(self, declared):
        assert normalize_version_range(declared) == ""


class TestValidatePackageName:
    """Tests for validate_package_name."""

    @pytest.mark.parametrize(
        "name",
        ["express", "left-pad", "lodash.merge", "@types/node", "@babel/core", "JSONStream"],
    )
    def test_valid_names(self, name):
        assert validate_package_name(name) == name

    @pytest.mark.parametrize(
        "name",
        ["", ".hidden", "_private", "has space", "bad\nname", "a/b", "@scope/"],
    )
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            validate_package_name(name)

    def test_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_package_name("a" * 215)
        assert "214" in str(exc_info.value)


class TestEncodePackageName:
    """Tests for encode_package_name_for_url."""

    def test_plain_name(self):
        assert encode_package_name_for_url("left-pad") == "left-pad"

    def test_scoped_name_for_registry(self):
        assert encode_package_name_for_url("@types/node") == "@types%2Fnode"

    def test_scoped_name_keeping_slash(self):
        assert encode_package_name_for_url("@types/node", keep_scope_slash=True) == "@types/node"


class TestValidateResponseSize:
    """Tests for validate_response_size."""

    def test_within_limit(self):
        validate_response_size(1024)
        validate_response_size(None)

    def test_over_limit(self):
        with pytest.raises(ValidationError):
            validate_response_size(11 * 1024 * 1024)

    def test_custom_limit(self):
        with pytest.raises(ValidationError):
            validate_response_size(2048, max_size=1024)
