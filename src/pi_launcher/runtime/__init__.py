"""Resolution and provisioning of the delegated tool.

This subpackage finds a runnable copy of the tool (project install, user
cache, bundled fallback), downloads it from GitHub on demand, and runs it.
"""

from pi_launcher.runtime.cache import CacheStore
from pi_launcher.runtime.delegate import ProcessDelegate
from pi_launcher.runtime.deps import DependencyInstaller
from pi_launcher.runtime.home import get_cache_root, get_launcher_dir
from pi_launcher.runtime.locators import BundledArtifactLocator, LocalInstallLocator
from pi_launcher.runtime.provision import RemoteProvisioner
from pi_launcher.runtime.resolver import (
    BundledNativeStrategy,
    BundledScriptStrategy,
    CacheStrategy,
    LocalInstallStrategy,
    ResolutionStrategy,
    Resolver,
)

__all__ = [
    "BundledArtifactLocator",
    "BundledNativeStrategy",
    "BundledScriptStrategy",
    "CacheStore",
    "CacheStrategy",
    "DependencyInstaller",
    "LocalInstallLocator",
    "LocalInstallStrategy",
    "ProcessDelegate",
    "RemoteProvisioner",
    "ResolutionStrategy",
    "Resolver",
    "get_cache_root",
    "get_launcher_dir",
]
