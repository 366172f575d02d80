"""Tests for PackageMetadataReader and LooseMetadataReader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

from modorch.config import OrchestratorConfig
from modorch.registry.readers import LooseMetadataReader, PackageMetadataReader
from sandbox import loose_record, package_record, write_json


def _installed(sandbox: Path) -> Path:
    return sandbox / "vendor" / "composer" / "installed.json"


# === PackageMetadataReader: file shapes ===


class TestPackageMetadataShapes:
    def test_packages_envelope(self, config: OrchestratorConfig) -> None:
        """A {"packages": [...]} envelope is read."""
        modules = PackageMetadataReader(config).read()
        assert [m.id for m in modules] == ["vendor/foo-module"]

    def test_single_package_record(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A bare package record is read."""
        write_json(_installed(sandbox), package_record())
        assert [m.id for m in PackageMetadataReader(config).read()] == ["vendor/foo-module"]

    def test_list_of_envelopes(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A list mixing envelopes and records is flattened."""
        second = package_record(name="vendor/bar", extra={"module": {"id": "vendor/bar"}})
        third = package_record(name="vendor/baz", extra={"module": {"id": "vendor/baz"}})
        write_json(_installed(sandbox), [{"packages": [package_record(), second]}, third, "junk"])
        ids = [m.id for m in PackageMetadataReader(config).read()]
        assert ids == ["vendor/foo-module", "vendor/bar", "vendor/baz"]

    def test_missing_file(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """No installed file means no modules."""
        _installed(sandbox).unlink()
        assert PackageMetadataReader(config).read() == []

    def test_corrupt_file(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """Unparsable JSON means no modules."""
        _installed(sandbox).write_text("{broken")
        assert PackageMetadataReader(config).read() == []

    def test_mapping_without_packages_or_name(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """An unrelated mapping yields nothing."""
        write_json(_installed(sandbox), {"dev": True})
        assert PackageMetadataReader(config).read() == []


# === PackageMetadataReader: selection and fields ===


class TestPackageMetadataFields:
    def test_descriptor_fields(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """Metadata block, providers and install path populate the descriptor."""
        (module,) = PackageMetadataReader(config).read()
        assert module.name == "Vendor Foo Module"
        assert module.version == "1.2.3"
        assert module.base_path == config.canonicalize_path(str(sandbox / "vendor" / "foo-module"))
        assert module.providers == ["vendor_foo.providers:FooProvider"]
        assert module.capabilities == ["api"]
        assert module.paths == {"routes": "routes/web.php", "migrations": "database/migrations"}
        assert module.extra["id"] == "vendor/foo-module"

    def test_default_state_from_config(self, make_config: Callable[..., OrchestratorConfig]) -> None:
        """installed/enabled come from configuration."""
        (module,) = PackageMetadataReader(make_config(auto_install=True, auto_enable=False)).read()
        assert (module.installed, module.enabled) == (True, False)
        (module,) = PackageMetadataReader(make_config(auto_install=False, auto_enable=True)).read()
        assert (module.installed, module.enabled) == (False, False)

    def test_skips_plain_library(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A package with neither module type nor metadata is skipped."""
        write_json(_installed(sandbox), {"packages": [{"name": "psr/log", "type": "library"}]})
        assert PackageMetadataReader(config).read() == []

    def test_module_type_without_metadata(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """The module package type alone is enough; id falls back to the name."""
        write_json(_installed(sandbox), {"packages": [{"name": "acme/crm", "type": "module", "version": "2.0"}]})
        (module,) = PackageMetadataReader(config).read()
        assert module.id == "acme/crm"
        assert module.name == "acme/crm"
        assert module.version == "2.0"
        assert module.base_path == config.absolute_path("vendor/acme/crm")

    def test_metadata_without_module_type(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A non-empty metadata block is enough for any package type."""
        package = package_record(type="library")
        write_json(_installed(sandbox), {"packages": [package]})
        assert [m.id for m in PackageMetadataReader(config).read()] == ["vendor/foo-module"]

    def test_skips_entry_without_id(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """No metadata id and no package name means skip."""
        write_json(_installed(sandbox), {"packages": [{"type": "module"}]})
        assert PackageMetadataReader(config).read() == []

    def test_pretty_version_fallback(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """Version falls back to pretty_version, then 0.0.0."""
        write_json(
            _installed(sandbox),
            {
                "packages": [
                    {"name": "a/one", "type": "module", "pretty_version": "v3.1"},
                    {"name": "a/two", "type": "module"},
                ]
            },
        )
        versions = {m.id: m.version for m in PackageMetadataReader(config).read()}
        assert versions == {"a/one": "v3.1", "a/two": "0.0.0"}

    def test_install_path_dash_variant(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """'install-path' is honoured like 'install_path'."""
        package = package_record()
        del package["install_path"]
        package["install-path"] = "../../packages/foo"
        write_json(_installed(sandbox), package)
        (module,) = PackageMetadataReader(config).read()
        assert module.base_path == config.absolute_path("packages/foo")

    def test_single_string_provider(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A scalar providers entry becomes a one-item list."""
        package = package_record()
        package["extra"]["providers"] = "vendor_foo.providers:FooProvider"
        write_json(_installed(sandbox), package)
        (module,) = PackageMetadataReader(config).read()
        assert module.providers == ["vendor_foo.providers:FooProvider"]

    def test_custom_metadata_keys(self, sandbox: Path, make_config: Callable[..., OrchestratorConfig]) -> None:
        """Package type and nested keys are configurable."""
        write_json(
            _installed(sandbox),
            {
                "packages": [
                    {
                        "name": "acme/blog",
                        "type": "host-plugin",
                        "extra": {"host": {"plugin": {"id": "acme/blog-plugin"}, "providers": ["blog:P"]}},
                    }
                ]
            },
        )
        config = make_config(
            module_package_type="host-plugin",
            module_metadata_key="extra.host.plugin",
            providers_key="extra.host.providers",
        )
        (module,) = PackageMetadataReader(config).read()
        assert module.id == "acme/blog-plugin"
        assert module.providers == ["blog:P"]


# === LooseMetadataReader ===


class TestLooseMetadataReader:
    def test_reads_matched_file(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A module.json file becomes a descriptor rooted at its directory."""
        (module,) = LooseMetadataReader(config).read()
        assert module.id == "custom/module-json"
        assert module.name == "Custom Module"
        assert module.version == "0.1.0"
        assert module.base_path == config.canonicalize_path(str(sandbox / "modules" / "custom"))
        assert module.paths == {"routes": ["routes/api.php", "routes/web.php"]}
        assert module.providers == ["custom_module.provider:Provider"]
        assert module.extra == loose_record()

    def test_skips_file_without_id(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """Files lacking an id are ignored."""
        write_json(sandbox / "modules" / "anon" / "module.json", {"name": "Anonymous"})
        assert [m.id for m in LooseMetadataReader(config).read()] == ["custom/module-json"]

    def test_skips_unparsable_file(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """Broken files are ignored without failing the scan."""
        broken = sandbox / "modules" / "broken" / "module.json"
        broken.parent.mkdir(parents=True)
        broken.write_text("{nope")
        assert [m.id for m in LooseMetadataReader(config).read()] == ["custom/module-json"]

    def test_defaults(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """name falls back to id and version to 0.0.0."""
        write_json(sandbox / "modules" / "custom" / "module.json", {"id": "custom/bare"})
        (module,) = LooseMetadataReader(config).read()
        assert module.name == "custom/bare"
        assert module.version == "0.0.0"
        assert module.providers == []

    def test_multiple_patterns(self, sandbox: Path, make_config: Callable[..., OrchestratorConfig]) -> None:
        """Every configured pattern is scanned."""
        write_json(sandbox / "packages" / "acme" / "blog" / "module.json", {"id": "acme/blog"})
        config = make_config(module_json_paths=["modules/*/module.json", "packages/*/*/module.json"])
        ids = [m.id for m in LooseMetadataReader(config).read()]
        assert ids == ["custom/module-json", "acme/blog"]

    def test_absolute_pattern(self, sandbox: Path, make_config: Callable[..., OrchestratorConfig]) -> None:
        """Absolute patterns are used as-is."""
        pattern = str(sandbox / "modules" / "*" / "module.json")
        config = make_config(module_json_paths=[pattern])
        assert [m.id for m in LooseMetadataReader(config).read()] == ["custom/module-json"]

    def test_state_defaults(self, make_config: Callable[..., OrchestratorConfig]) -> None:
        """Loose modules use the same default state policy."""
        (module,) = LooseMetadataReader(make_config(auto_enable=False)).read()
        assert (module.installed, module.enabled) == (True, False)


def test_base_path_is_canonical(sandbox: Path, config: OrchestratorConfig) -> None:
    """Install paths with '..' never leak into descriptors."""
    (module,) = PackageMetadataReader(config).read()
    assert ".." not in module.base_path.split(os.sep)


class TestNonStringNames:
    def test_package_name_must_be_string(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A non-string metadata name falls back to the package name."""
        package = package_record()
        package["extra"]["module"]["name"] = 123
        write_json(_installed(sandbox), package)
        (module,) = PackageMetadataReader(config).read()
        assert module.name == "vendor/foo-module"

    def test_package_id_must_be_string(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A non-string metadata id falls back to the package name."""
        package = package_record()
        package["extra"]["module"]["id"] = ["not", "an", "id"]
        write_json(_installed(sandbox), package)
        (module,) = PackageMetadataReader(config).read()
        assert module.id == "vendor/foo-module"

    def test_loose_name_must_be_string(self, sandbox: Path, config: OrchestratorConfig) -> None:
        """A non-string loose name falls back to the id."""
        write_json(sandbox / "modules" / "custom" / "module.json", loose_record(name=123))
        (module,) = LooseMetadataReader(config).read()
        assert module.name == "custom/module-json"
