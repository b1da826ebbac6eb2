"""
Provisioning Steps Package.

One module per step, in run order. Each step takes its inputs as explicit
parameters, returns a StepResult (plus any artifact the next step needs)
and raises a ProvisionError subclass when it cannot complete.
"""

from .dependencies import install_dependencies, install_submodules
from .manifest import Manifest, PipSection, default_manifest, load_manifest, write_manifest
from .packages import install_system_packages
from .repository import RepositoryCheckout, fetch_repository
from .selector import select_backend
from .toolchain import parse_nvcc_release, probe_toolchain
from .verify import FrameworkStatus, parse_probe_output, verify_framework

__all__ = [
    "probe_toolchain",
    "parse_nvcc_release",
    "install_system_packages",
    "select_backend",
    "fetch_repository",
    "RepositoryCheckout",
    "Manifest",
    "PipSection",
    "default_manifest",
    "load_manifest",
    "write_manifest",
    "install_dependencies",
    "install_submodules",
    "verify_framework",
    "parse_probe_output",
    "FrameworkStatus",
]
