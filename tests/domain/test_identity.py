"""Tests for VersionQuad and ModuleIdentity parsing and rendering."""

import pytest
from pydantic import ValidationError

from identkit.domain.identity import MalformedIdentityError, ModuleIdentity, VersionQuad


class TestVersionQuadParse:
    def test_four_components(self) -> None:
        v = VersionQuad.parse("1.2.3.4")
        assert (v.major, v.minor, v.build, v.revision) == (1, 2, 3, 4)

    def test_two_components_leave_build_and_revision_undefined(self) -> None:
        v = VersionQuad.parse("1.0")
        assert v.build is None
        assert v.revision is None

    def test_three_components(self) -> None:
        v = VersionQuad.parse("2.1.5")
        assert (v.major, v.minor, v.build, v.revision) == (2, 1, 5, None)

    def test_zero_is_not_undefined(self) -> None:
        v = VersionQuad.parse("1.0.0.0")
        assert v.revision == 0

    @pytest.mark.parametrize("text", ["", "1", "1.2.3.4.5", "1.-2", "a.b", "1. 2", "1.2rc1", "1..2"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(MalformedIdentityError):
            VersionQuad.parse(text)

    def test_str_renders_defined_components(self) -> None:
        assert str(VersionQuad.parse("3.4.5")) == "3.4.5"


class TestVersionQuadModel:
    def test_revision_requires_build(self) -> None:
        with pytest.raises(ValidationError):
            VersionQuad(major=1, minor=0, revision=2)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VersionQuad(major=1, minor=-1)

    def test_frozen(self) -> None:
        v = VersionQuad(major=1, minor=0)
        with pytest.raises(ValidationError):
            v.major = 2  # type: ignore[misc]

    def test_sort_key_puts_undefined_below_zero(self) -> None:
        assert VersionQuad.parse("1.0").sort_key() < VersionQuad.parse("1.0.0").sort_key()


class TestVersionQuadFromRelease:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2.7.0", (2, 7, 0, None)),
            ("2.7.0rc1", (2, 7, 0, None)),
            ("24", (24, 0, None, None)),
            ("v1.2", (1, 2, None, None)),
            ("1.2.3.4.5", (1, 2, 3, 4)),
        ],
    )
    def test_lenient(self, text: str, expected: tuple) -> None:
        v = VersionQuad.from_release(text)
        assert v is not None
        assert (v.major, v.minor, v.build, v.revision) == expected

    @pytest.mark.parametrize("text", [None, "", "dev", "unknown"])
    def test_no_version(self, text: str | None) -> None:
        assert VersionQuad.from_release(text) is None


class TestModuleIdentityPersistable:
    def test_parse(self) -> None:
        identity = ModuleIdentity.from_persistable("MyAssembly/1.2.3.4")
        assert identity.name == "MyAssembly"
        assert identity.version == VersionQuad(major=1, minor=2, build=3, revision=4)

    def test_splits_on_first_separator_only(self) -> None:
        with pytest.raises(MalformedIdentityError):
            ModuleIdentity.from_persistable("a/1.0/extra")

    def test_missing_separator(self) -> None:
        with pytest.raises(MalformedIdentityError) as info:
            ModuleIdentity.from_persistable("NoVersionHere")
        assert info.value.value == "NoVersionHere"

    def test_empty_name(self) -> None:
        with pytest.raises(MalformedIdentityError):
            ModuleIdentity.from_persistable("/1.0")

    def test_empty_version(self) -> None:
        with pytest.raises(MalformedIdentityError):
            ModuleIdentity.from_persistable("Name/")

    def test_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            ModuleIdentity.from_persistable("bad")

    @pytest.mark.parametrize("text", ["TestAssembly/1.0", "AnotherAssembly/2.1.5", "Pkg/0.0.0.7"])
    def test_round_trip(self, text: str) -> None:
        assert ModuleIdentity.from_persistable(text).to_persistable() == text

    def test_round_trip_from_model(self) -> None:
        identity = ModuleIdentity(name="pydantic", version=VersionQuad(major=2, minor=7))
        assert ModuleIdentity.from_persistable(identity.to_persistable()) == identity

    def test_unversioned_renders_bare_name(self) -> None:
        assert ModuleIdentity(name="yaml").to_persistable() == "yaml"


class TestModuleIdentityModel:
    def test_name_with_separator_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModuleIdentity(name="a/b")

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModuleIdentity(name="   ")

    def test_key_is_casefolded(self) -> None:
        assert ModuleIdentity(name="Foo").key == ModuleIdentity(name="FOO").key
