"""Vault configuration and path resolution."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Vault:
    """Container representing a vault root."""

    name: str
    root: Path


class VaultConfigurationError(ValueError):
    """Raised when vault configuration is invalid."""


def parse_vault_paths(raw: str) -> dict[str, Vault]:
    """Parse a comma separated list of vault paths into :class:`Vault` objects."""

    if not raw:
        raise VaultConfigurationError("VAULT_PATHS must be provided")

    vaults: dict[str, Vault] = {}
    for chunk in raw.split(","):
        candidate = chunk.strip()
        if not candidate:
            continue
        path = Path(candidate).expanduser()
        if not path.is_absolute():
            raise VaultConfigurationError(f"Vault path must be absolute: {candidate!r}")
        root = path.resolve(strict=False)
        if root.name in vaults:
            raise VaultConfigurationError(f"Duplicate vault name detected: {root.name}")
        vaults[root.name] = Vault(name=root.name, root=root)

    if not vaults:
        raise VaultConfigurationError("No valid vault paths provided")

    return vaults


def ensure_in_vault(path: Path, vaults: Mapping[str, Vault]) -> Vault:
    """Return the vault containing *path*; raise :class:`PermissionError` otherwise."""

    resolved = path.resolve(strict=False)
    for vault in vaults.values():
        if resolved.is_relative_to(vault.root):
            return vault
    raise PermissionError(f"Path {resolved} is outside configured vaults")


def resolve_search_root(root: str | None, vaults: Mapping[str, Vault]) -> Path:
    """Pick the directory a search should scan.

    *root* may be a vault name, a vault-prefixed folder (``Vault/daily``) or an
    absolute path inside a vault. Without *root* the only configured vault is
    used.
    """

    if root is None:
        if len(vaults) == 1:
            return next(iter(vaults.values())).root
        raise ValueError("Multiple vaults configured; specify the 'root' parameter")

    path = Path(root)
    if path.is_absolute():
        ensure_in_vault(path, vaults)
        return path.resolve(strict=False)

    if not path.parts:
        raise ValueError("Empty path provided")

    first, *rest = path.parts
    if first in vaults:
        target = vaults[first].root.joinpath(*rest)
    elif len(vaults) == 1:
        target = next(iter(vaults.values())).root / path
    else:
        raise ValueError("Ambiguous path - prefix with vault name (e.g. 'VaultName/daily')")

    ensure_in_vault(target, vaults)
    return target


def list_vault_names(vaults: Iterable[Vault]) -> list[str]:
    """Return vault names sorted alphabetically."""

    return sorted(v.name for v in vaults)
