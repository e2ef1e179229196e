"""Tests for bikecase configuration."""

import tomllib
from pathlib import Path

import pytest

from bikecase.config import (
    BikecaseConfig,
    GithubTokenConfig,
    WorkspaceConfig,
    compress_home,
    default_config,
    expand_home,
    load_config,
    load_or_create_config,
    save_config,
)
from bikecase.constants import TEMPLATE_PACKAGE_MANIFEST, TEMPLATE_SCRIPT
from bikecase.errors import ConfigError


def test_compress_home(tmp_path: Path):
    """Paths under the home directory should start with ~."""
    assert compress_home(tmp_path / "a" / "b", home=tmp_path) == "~/a/b"
    assert compress_home(tmp_path, home=tmp_path) == "~"


def test_compress_home_outside(tmp_path: Path):
    """Paths outside the home directory should be kept as given."""
    assert compress_home("/opt/ws", home=tmp_path) == "/opt/ws"
    assert compress_home(f"{tmp_path}-other/ws", home=tmp_path) == f"{tmp_path}-other/ws"


def test_expand_home(tmp_path: Path):
    """A leading ~ should expand to the home directory."""
    assert expand_home("~/ws", home=tmp_path) == tmp_path / "ws"
    assert expand_home("~", home=tmp_path) == tmp_path
    assert expand_home("/opt/ws", home=tmp_path) == Path("/opt/ws")
    assert expand_home("~other/ws", home=tmp_path) == Path("~other/ws")


def test_default_config(tmp_path: Path):
    """The default config should point into the data directory."""
    config = default_config(tmp_path / ".config" / "bikecase", home=tmp_path)

    assert config.default == "~/.config/bikecase/default-workspace"
    assert config.github_token == GithubTokenConfig(path="~/.config/bikecase/github-token")
    assert config.workspaces == {"~/.config/bikecase/default-workspace": WorkspaceConfig()}
    assert config.template_manifest() == TEMPLATE_PACKAGE_MANIFEST


def test_save_and_load_round_trip(tmp_path: Path):
    """A saved config should load back unchanged."""
    config = default_config(tmp_path, home=tmp_path)
    config.workspaces["~/default-workspace"].gist_ids["hello"] = "abc"
    path = tmp_path / "nested" / "config.toml"

    save_config(config, path)

    assert load_config(path) == config
    data = tomllib.loads(path.read_text())
    assert data["workspaces"]["~/default-workspace"]["gist_ids"] == {"hello": "abc"}
    assert data["template"]["src"]["main.rs"] == TEMPLATE_SCRIPT


def test_save_dry_run(tmp_path: Path):
    """Dry-run saves should write nothing."""
    save_config(BikecaseConfig(), tmp_path / "x" / "config.toml", dry_run=True)
    assert not (tmp_path / "x").exists()


def test_load_invalid_toml(tmp_path: Path):
    """Broken TOML should raise ConfigError."""
    path = tmp_path / "config.toml"
    path.write_text("default = \n")
    with pytest.raises(ConfigError, match="failed to parse"):
        load_config(path)


def test_load_invalid_schema(tmp_path: Path):
    """Values of the wrong type should raise ConfigError."""
    path = tmp_path / "config.toml"
    path.write_text("workspaces = 1\n")
    with pytest.raises(ConfigError, match="failed to parse"):
        load_config(path)


def test_load_missing_file(tmp_path: Path):
    """A missing file should raise ConfigError."""
    with pytest.raises(ConfigError, match="failed to read"):
        load_config(tmp_path / "missing.toml")


def test_load_or_create_writes_default(tmp_path: Path):
    """The default config should be written on first use."""
    path = tmp_path / "config.toml"
    config = load_or_create_config(path, home=tmp_path)

    assert path.exists()
    assert config.default == "~/default-workspace"
    assert load_or_create_config(path, home=tmp_path) == config


def test_load_or_create_dry_run(tmp_path: Path):
    """Dry-run should not create the config file."""
    path = tmp_path / "config.toml"
    config = load_or_create_config(path, dry_run=True, home=tmp_path)

    assert config.default == "~/default-workspace"
    assert not path.exists()


def test_workspace_lookup(tmp_path: Path):
    """Workspaces should be found by their expanded root."""
    workspace = WorkspaceConfig(gist_ids={"a": "1"})
    config = BikecaseConfig(workspaces={"~/ws": workspace})

    assert config.workspace(tmp_path / "ws", home=tmp_path) == workspace
    assert config.workspace(tmp_path / "other", home=tmp_path) is None


def test_workspace_or_default_inserts(tmp_path: Path):
    """Unknown workspaces should get empty settings under a ~ key."""
    config = BikecaseConfig()

    workspace = config.workspace_or_default(tmp_path / "ws", home=tmp_path)
    workspace.gist_ids["a"] = "1"

    assert config.workspaces == {"~/ws": WorkspaceConfig(gist_ids={"a": "1"})}
    assert config.workspace_or_default(tmp_path / "ws", home=tmp_path) is workspace


def test_template_files(tmp_path: Path):
    """Nested template tables should flatten into paths."""
    config = BikecaseConfig(
        template={"Cargo.toml": "m", "src": {"main.rs": "s", "bin": {"x.rs": "x"}}}
    )

    assert config.template_files(tmp_path) == {
        tmp_path / "Cargo.toml": "m",
        tmp_path / "src" / "main.rs": "s",
        tmp_path / "src" / "bin" / "x.rs": "x",
    }


def test_template_files_rejects_other_values(tmp_path: Path):
    """Template entries must be strings or tables."""
    config = BikecaseConfig(template={"src": {"main.rs": 1}})
    with pytest.raises(ConfigError, match="src/main.rs"):
        config.template_files(tmp_path)


def test_template_manifest_missing():
    """A template without Cargo.toml should raise ConfigError."""
    with pytest.raises(ConfigError, match="missing"):
        BikecaseConfig().template_manifest()


def test_template_manifest_wrong_type():
    """A Cargo.toml table instead of a string should raise ConfigError."""
    with pytest.raises(ConfigError, match="expected string"):
        BikecaseConfig(template={"Cargo.toml": {}}).template_manifest()


def test_token_read_from_file(tmp_path: Path):
    """An existing token file should be read without prompting."""
    (tmp_path / "github-token").write_text("secret\n")
    token_config = GithubTokenConfig(path="~/github-token")

    def ask(prompt: str) -> str:
        raise AssertionError("should not prompt")

    assert token_config.load_or_ask(ask, home=tmp_path) == "secret"


def test_token_prompted_and_saved(tmp_path: Path):
    """A missing token should be prompted for and saved."""
    token_config = GithubTokenConfig(path="~/data/github-token")

    assert token_config.load_or_ask(lambda prompt: " secret ", home=tmp_path) == "secret"
    assert (tmp_path / "data" / "github-token").read_text() == "secret"


def test_token_prompt_dry_run(tmp_path: Path):
    """Dry-run should not save a prompted token."""
    token_config = GithubTokenConfig(path="~/data/github-token")

    assert token_config.load_or_ask(lambda prompt: "secret", dry_run=True, home=tmp_path) == "secret"
    assert not (tmp_path / "data").exists()
