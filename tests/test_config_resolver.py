"""Tests for configuration resolution."""

from pathlib import Path

import pytest

from hookdeploy.core.config_resolver import ConfigInvalid, ConfigLayer, load_defaults, resolve_config
from hookdeploy.core.models import Strategy
from hookdeploy.hooks.catalog import RECOGNIZED_HOOKS


DEFAULTS = {"symlink": True, "source-directory": "git-hooks"}


def test_defaults_file_loads():
    """Test the bundled defaults resolve to symlink from git-hooks."""
    layer = load_defaults()

    assert layer.symlink is True
    assert layer.source_directory == "git-hooks"

    config = resolve_config()
    assert config.strategy == Strategy.SYMLINK
    assert config.source_directory == Path("git-hooks")
    assert config.hook_names == RECOGNIZED_HOOKS
    assert config.hook_names_explicit is False


def test_no_overrides_returns_defaults():
    """Test resolution with empty manifest and options keeps the defaults."""
    config = resolve_config(DEFAULTS, {}, {})

    assert config.strategy == Strategy.SYMLINK
    assert config.source_directory == Path("git-hooks")
    assert config.hooks_path_value is None


def test_options_override_manifest():
    """Test caller options win over the manifest."""
    config = resolve_config(DEFAULTS, {"no-symlink": True}, {"symlink": True})

    assert config.strategy == Strategy.SYMLINK


def test_manifest_overrides_defaults():
    """Test manifest values win over the defaults."""
    config = resolve_config(
        DEFAULTS,
        {"no-symlink": True, "source-directory": "tools/hooks"},
        None,
    )

    assert config.strategy == Strategy.COPY
    assert config.source_directory == Path("tools/hooks")


def test_symlink_false_means_copy():
    """Test symlink: false selects the copy strategy."""
    config = resolve_config(DEFAULTS, {"symlink": False}, None)

    assert config.strategy == Strategy.COPY


def test_core_hooks_path_selects_hooks_path():
    """Test core-hooks-path selects hooks-path and carries the value."""
    config = resolve_config(DEFAULTS, None, {"core-hooks-path": "/custom/hooks"})

    assert config.strategy == Strategy.HOOKS_PATH
    assert config.hooks_path_value == "/custom/hooks"


def test_lower_layer_hooks_path_is_replaced():
    """Test a higher layer strategy drops the hooks-path value of a lower one."""
    config = resolve_config(DEFAULTS, {"core-hooks-path": ".githooks"}, {"no-symlink": True})

    assert config.strategy == Strategy.COPY
    assert config.hooks_path_value is None


def test_symlink_and_no_symlink_conflict():
    """Test symlink and no-symlink together are rejected."""
    with pytest.raises(ConfigInvalid, match="mutuamente exclusivos"):
        resolve_config(DEFAULTS, None, {"symlink": True, "no-symlink": True})


def test_symlink_and_hooks_path_conflict():
    """Test two strategies in the same layer are rejected."""
    with pytest.raises(ConfigInvalid) as excinfo:
        resolve_config(DEFAULTS, {"symlink": True, "core-hooks-path": "x"}, None)

    assert excinfo.value.source == "manifest"
    assert "hooks-path" in str(excinfo.value)


def test_consistent_votes_in_one_layer_are_accepted():
    """Test symlink: true and no-symlink: false agree."""
    config = resolve_config(DEFAULTS, {"symlink": True, "no-symlink": False}, None)

    assert config.strategy == Strategy.SYMLINK


def test_unknown_hook_rejected():
    """Test hook names outside the recognized set are rejected."""
    with pytest.raises(ConfigInvalid, match="hook desconhecido"):
        resolve_config(DEFAULTS, None, {"hooks": ["pre-comit"]})


def test_unknown_key_rejected():
    """Test unknown manifest keys are rejected."""
    with pytest.raises(ConfigInvalid, match="chave desconhecida"):
        resolve_config(DEFAULTS, {"symlinks": True}, None)


def test_wrong_types_rejected():
    """Test type validation of manifest values."""
    with pytest.raises(ConfigInvalid):
        resolve_config(DEFAULTS, {"symlink": "yes"}, None)

    with pytest.raises(ConfigInvalid):
        resolve_config(DEFAULTS, {"hooks": {"pre-commit": True}}, None)

    with pytest.raises(ConfigInvalid):
        resolve_config(DEFAULTS, {"source-directory": ""}, None)


def test_empty_hooks_list_rejected():
    """Test an explicit empty hooks list is invalid."""
    with pytest.raises(ConfigInvalid, match="pelo menos um hook"):
        resolve_config(DEFAULTS, {"hooks": []}, None)


def test_explicit_hooks_are_deduplicated_in_order():
    """Test explicit hook lists keep order and drop duplicates."""
    config = resolve_config(
        DEFAULTS,
        None,
        {"hooks": ["pre-push", "pre-commit", "pre-push"]},
    )

    assert config.hook_names == ("pre-push", "pre-commit")
    assert config.hook_names_explicit is True


def test_single_hook_string_accepted():
    """Test a single hook name given as a string."""
    config = resolve_config(DEFAULTS, {"hooks": "commit-msg"}, None)

    assert config.hook_names == ("commit-msg",)
    assert config.hook_names_explicit is True


def test_hooks_from_defaults_are_not_explicit():
    """Test a hooks list in the defaults layer is not an explicit request."""
    config = resolve_config({**DEFAULTS, "hooks": ["pre-commit"]}, None, None)

    assert config.hook_names == ("pre-commit",)
    assert config.hook_names_explicit is False


def test_missing_strategy_rejected():
    """Test resolution fails when no layer picks a strategy."""
    with pytest.raises(ConfigInvalid, match="nenhuma estratégia"):
        resolve_config({"source-directory": "git-hooks"}, None, None)


def test_missing_source_directory_rejected():
    """Test resolution fails without a source directory."""
    with pytest.raises(ConfigInvalid, match="source-directory"):
        resolve_config({"symlink": True}, None, None)


def test_field_names_accepted():
    """Test layers accept python field names as well as manifest keys."""
    layer = ConfigLayer.from_mapping({"no_symlink": True, "source_directory": Path("hooks")})

    assert layer.no_symlink is True
    assert layer.source_directory == "hooks"
    assert layer.strategy() == Strategy.COPY


def test_duplicate_key_spelling_rejected():
    """Test the same field given under both spellings is rejected."""
    with pytest.raises(ConfigInvalid, match="duas vezes"):
        ConfigLayer.from_mapping({"no-symlink": True, "no_symlink": True})


def test_layer_must_be_mapping():
    """Test a non-mapping layer is rejected."""
    with pytest.raises(ConfigInvalid, match="objeto"):
        resolve_config(DEFAULTS, ["symlink"], None)


def test_hooks_path_with_hook_list_warns(caplog):
    """Test an explicit hook list is ignored under hooks-path with a warning."""
    config = resolve_config(
        DEFAULTS,
        None,
        {"core-hooks-path": ".githooks", "hooks": ["pre-commit"]},
    )

    assert config.strategy == Strategy.HOOKS_PATH
    assert "Lista de hooks ignorada" in caplog.text


def test_load_defaults_invalid_yaml(tmp_path):
    """Test a broken defaults file raises ConfigInvalid."""
    broken = tmp_path / "defaults.yaml"
    broken.write_text("symlink: [unclosed\n")

    with pytest.raises(ConfigInvalid, match="YAML"):
        load_defaults(broken)


def test_load_defaults_missing_file(tmp_path):
    """Test a missing defaults file raises ConfigInvalid."""
    with pytest.raises(ConfigInvalid, match="Erro ao ler"):
        load_defaults(tmp_path / "missing.yaml")
