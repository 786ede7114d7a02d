import pytest

from obsidian_context.paths import (
    VaultConfigurationError,
    ensure_in_vault,
    list_vault_names,
    parse_vault_paths,
    resolve_search_root,
)


def test_parse_vault_paths(tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    mapping = parse_vault_paths(str(vault))
    assert len(mapping) == 1
    assert "vault" in mapping
    assert mapping["vault"].root == vault.resolve()


def test_parse_vault_paths_requires_absolute():
    with pytest.raises(VaultConfigurationError):
        parse_vault_paths("relative/path")


def test_parse_vault_paths_rejects_duplicates(tmp_path):
    first = tmp_path / "a" / "notes"
    second = tmp_path / "b" / "notes"
    with pytest.raises(VaultConfigurationError, match="Duplicate"):
        parse_vault_paths(f"{first},{second}")


def test_parse_vault_paths_requires_value():
    with pytest.raises(VaultConfigurationError):
        parse_vault_paths("")
    with pytest.raises(VaultConfigurationError):
        parse_vault_paths(" , ")


def test_ensure_in_vault_rejects_escape(tmp_path):
    vault = tmp_path / "vault"
    outside = tmp_path / "outside"
    vault.mkdir()
    outside.mkdir()
    vaults = parse_vault_paths(str(vault))
    with pytest.raises(PermissionError):
        ensure_in_vault(outside / "note.md", vaults)


def test_resolve_search_root_defaults_to_single_vault(tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    vaults = parse_vault_paths(str(vault))
    assert resolve_search_root(None, vaults) == vault.resolve()


def test_resolve_search_root_with_vault_prefix(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    vaults = parse_vault_paths(f"{first},{second}")
    assert resolve_search_root("second/daily", vaults) == second.resolve() / "daily"
    assert resolve_search_root("first", vaults) == first.resolve()


def test_resolve_search_root_ambiguous(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    vaults = parse_vault_paths(f"{first},{second}")
    with pytest.raises(ValueError, match="Multiple vaults"):
        resolve_search_root(None, vaults)
    with pytest.raises(ValueError, match="Ambiguous"):
        resolve_search_root("daily", vaults)


def test_resolve_search_root_rejects_escape(tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    vaults = parse_vault_paths(str(vault))
    with pytest.raises(PermissionError):
        resolve_search_root("../elsewhere", vaults)
    with pytest.raises(PermissionError):
        resolve_search_root(str(tmp_path), vaults)


def test_list_vault_names(tmp_path):
    vaults = parse_vault_paths(f"{tmp_path / 'zeta'},{tmp_path / 'alpha'}")
    assert list_vault_names(vaults.values()) == ["alpha", "zeta"]
