"""Unit tests for verbump.core.specifier (parse_version / format_version)."""

from __future__ import annotations

import pytest

from verbump.models import ProtocolKind, VersionSpecifier
from verbump.core.specifier import format_version, is_supported_protocol, parse_version


@pytest.mark.unit
class TestParseVersion:
    """Tests for parse_version."""

    def test_bare_exact(self) -> None:
        assert parse_version("1.2.3") == VersionSpecifier(semver="1.2.3")

    @pytest.mark.parametrize("prefix", ["^", "~", ">=", ">", "<=", "<", "=", "v"])
    def test_range_prefixes(self, prefix: str) -> None:
        spec = parse_version(f"{prefix}1.2.3")

        assert spec is not None
        assert spec.prefix == prefix
        assert spec.semver == "1.2.3"
        assert spec.protocol is None

    def test_prerelease_and_build_kept_in_core(self) -> None:
        spec = parse_version("^2.0.0-beta.1+exp.sha.5114f85")

        assert spec is not None
        assert spec.semver == "2.0.0-beta.1+exp.sha.5114f85"

    def test_npm_alias(self) -> None:
        spec = parse_version("npm:lodash@^4.17.21")

        assert spec == VersionSpecifier(
            semver="4.17.21", protocol="npm", alias="lodash", prefix="^"
        )
        assert spec.kind is ProtocolKind.NPM

    def test_scoped_alias(self) -> None:
        spec = parse_version("npm:@types/node@18.11.9")

        assert spec is not None
        assert spec.alias == "@types/node"
        assert spec.semver == "18.11.9"

    def test_protocol_without_alias(self) -> None:
        spec = parse_version("npm:1.0.0")

        assert spec is not None
        assert spec.protocol == "npm"
        assert spec.alias is None

    def test_workspace_with_version(self) -> None:
        spec = parse_version("workspace:^1.2.3")

        assert spec is not None
        assert spec.kind is ProtocolKind.WORKSPACE
        assert spec.semver == "1.2.3"

    def test_unknown_protocol_kind(self) -> None:
        spec = parse_version("link:1.0.0")

        assert spec is not None
        assert spec.kind is ProtocolKind.OTHER

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "*",
            "latest",
            "1.x",
            "1.2",
            "workspace:*",
            "catalog:",
            "file:../local-pkg",
            "github:user/repo#v1.2.3",
            "https://example.com/pkg-1.2.3.tgz",
            "^1.2.3 || ^2.0.0",
            ">=1.2.3 <2.0.0",
            " ^1.2.3",
            "lodash@1.2.3",
        ],
    )
    def test_unrecognized_returns_none(self, raw: str) -> None:
        """No semver core (or a bare alias) means no specifier, not an error."""
        assert parse_version(raw) is None


@pytest.mark.unit
class TestFormatVersion:
    """Tests for format_version."""

    def test_bare(self) -> None:
        assert format_version(VersionSpecifier(semver="1.0.0", prefix="~")) == "~1.0.0"

    def test_full_shape(self) -> None:
        spec = VersionSpecifier(semver="2.0.0", protocol="npm", alias="@scope/pkg", prefix="^")
        assert format_version(spec) == "npm:@scope/pkg@^2.0.0"

    def test_substitutes_core_only(self) -> None:
        spec = parse_version("npm:lodash@~4.17.20")
        assert spec is not None
        assert format_version(spec.with_semver("4.17.21")) == "npm:lodash@~4.17.21"

    @pytest.mark.parametrize(
        "raw",
        [
            "1.2.3",
            "^1.2.3",
            "~0.0.1",
            ">=3.0.0-rc.1",
            "v2.0.0",
            "npm:lodash@^4.17.21",
            "npm:@babel/core@7.22.0",
            "npm:1.0.0",
            "workspace:~1.0.0",
            "=1.0.0+build.7",
        ],
    )
    def test_round_trip(self, raw: str) -> None:
        spec = parse_version(raw)

        assert spec is not None
        assert format_version(spec) == raw
        assert parse_version(format_version(spec)) == spec


@pytest.mark.unit
class TestIsSupportedProtocol:
    """Tests for is_supported_protocol."""

    def test_bare_and_npm_supported(self) -> None:
        assert is_supported_protocol(None) is True
        assert is_supported_protocol("npm") is True

    @pytest.mark.parametrize("protocol", ["workspace", "catalog", "jsr", "link", "file"])
    def test_others_unsupported(self, protocol: str) -> None:
        assert is_supported_protocol(protocol) is False
