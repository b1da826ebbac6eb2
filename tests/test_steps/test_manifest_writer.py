"""
Test Suite for the dependency manifest writer.

Covers the default content, the never-overwrite rule and validation of
manifests found on disk.
"""

from __future__ import annotations

import pytest
import yaml

from splatstrap.exceptions import ProvisionError
from splatstrap.pipeline.results import StepStatus
from splatstrap.steps.manifest import (
    Manifest,
    PipSection,
    default_manifest,
    load_manifest,
    write_manifest,
)

EXPECTED_DEFAULT = {
    "name": "triangle-splatting",
    "channels": ["conda-forge", "pytorch", "nvidia"],
    "dependencies": [
        "python=3.11",
        "pytorch::pytorch=2.4.1",
        "pytorch::torchvision",
        "conda-forge::tqdm",
        "conda-forge::matplotlib",
        "conda-forge::plyfile",
        "conda-forge::opencv",
        "conda-forge::imageio",
        "conda-forge::imageio-ffmpeg",
        "conda-forge::lpips",
        "pip",
        {"pip": ["submodules/diff-surfel-rasterization", "submodules/simple-knn"]},
    ],
}


@pytest.mark.unit
class TestDefaultManifest:
    def test_matches_stock_environment_file(self):
        assert default_manifest().model_dump(mode="json") == EXPECTED_DEFAULT

    def test_custom_name_and_python(self):
        manifest = default_manifest(name="splat", python_version="3.10")

        assert manifest.name == "splat"
        assert manifest.conda_specs()[0] == "python=3.10"

    def test_spec_partitions(self):
        manifest = default_manifest(pip_paths=["submodules/a"])

        assert manifest.pip_specs() == ["submodules/a"]
        assert "pip" in manifest.conda_specs()
        assert all(isinstance(s, str) for s in manifest.conda_specs())


@pytest.mark.unit
class TestWriteManifest:
    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "requirements.yaml"

        manifest, result = write_manifest(path)

        assert result.status is StepStatus.OK
        assert path.exists()
        assert yaml.safe_load(path.read_text()) == EXPECTED_DEFAULT
        assert manifest == default_manifest()

    def test_existing_file_is_never_overwritten(self, tmp_path):
        path = tmp_path / "requirements.yaml"
        original = "name: custom\nchannels: [conda-forge]\ndependencies:\n  - python=3.10\n"
        path.write_text(original)

        manifest, result = write_manifest(path, default_manifest())

        assert result.status is StepStatus.SKIPPED
        assert path.read_text() == original
        assert manifest.name == "custom"

    def test_force_overwrites(self, tmp_path):
        path = tmp_path / "requirements.yaml"
        path.write_text("name: custom\n")

        manifest, result = write_manifest(path, default_manifest(name="fresh"), force=True)

        assert result.status is StepStatus.OK
        assert manifest.name == "fresh"

    def test_leaves_no_temp_file(self, tmp_path):
        write_manifest(tmp_path / "requirements.yaml")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["requirements.yaml"]

    def test_invalid_existing_manifest_is_fatal(self, tmp_path):
        path = tmp_path / "requirements.yaml"
        path.write_text("channels: [conda-forge]\n")

        with pytest.raises(ProvisionError, match="Invalid dependency manifest"):
            write_manifest(path)


@pytest.mark.unit
class TestLoadManifest:
    def test_preserves_extra_keys(self, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text("name: env\nprefix: /opt/env\ndependencies:\n  - pip:\n    - lpips\n")

        manifest = load_manifest(path)

        assert manifest.model_extra == {"prefix": "/opt/env"}
        assert manifest.dependencies == [PipSection(pip=["lpips"])]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProvisionError):
            load_manifest(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text("name: [unclosed\n")

        with pytest.raises(ProvisionError):
            load_manifest(path)

    def test_model_is_frozen(self):
        with pytest.raises(ValueError):
            Manifest(name="x").name = "y"  # type: ignore[misc]
