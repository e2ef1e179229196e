"""Configuration management for bikecase."""

import logging
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import tomli_w
import typer
from pydantic import BaseModel, Field, ValidationError

from .constants import MANIFEST_FILE_NAME, TEMPLATE_PACKAGE_MANIFEST, TEMPLATE_SCRIPT
from .errors import ConfigError, PathNotRepresentableError
from .services import filesystem

logger = logging.getLogger(__name__)

APP_NAME = "bikecase"
CONFIG_FILE_NAME = "config.toml"


def default_config_path() -> Path:
    """Get the default config file path inside the user's app directory."""
    return Path(typer.get_app_dir(APP_NAME)) / CONFIG_FILE_NAME


def compress_home(path: Path | str, home: Path | None = None) -> str:
    """Render a path with the home directory replaced by `~`.

    Raises:
        PathNotRepresentableError: If the path is not valid UTF-8
    """
    home = home if home is not None else Path.home()
    text = str(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise PathNotRepresentableError(f"{text!r} is not a valid UTF-8 path") from None
    home_text = str(home)
    if text == home_text:
        return "~"
    if text.startswith(home_text.rstrip("/") + "/"):
        return "~" + text[len(home_text.rstrip("/")) :]
    return text


def expand_home(path: str, home: Path | None = None) -> Path:
    """Expand a leading `~` in a stored path."""
    if path != "~" and not path.startswith("~/"):
        return Path(path)
    home = home if home is not None else Path.home()
    return home / path[2:]


class GithubTokenConfig(BaseModel):
    """Where the GitHub token is stored."""

    kind: Literal["file"] = "file"
    path: str

    def load_or_ask(
        self,
        ask: Callable[[str], str],
        dry_run: bool = False,
        home: Path | None = None,
    ) -> str:
        """Read the token file, or prompt for a token and save it.

        Args:
            ask: Prompt function returning the entered token
            dry_run: If True, do not save a prompted token
            home: Home directory used to expand `~`

        Returns:
            The GitHub token
        """
        path = expand_home(self.path, home)
        if path.exists():
            return filesystem.read(path).strip()
        token = ask("GitHub token").strip()
        filesystem.create_dir_all(path.parent, dry_run)
        filesystem.write(path, token, dry_run)
        return token


class WorkspaceConfig(BaseModel):
    """Per-workspace settings."""

    template_package: str | None = None
    gist_ids: dict[str, str] = Field(default_factory=dict)


class BikecaseConfig(BaseModel):
    """Root configuration for bikecase."""

    default: str | None = None
    github_token: GithubTokenConfig | None = None
    workspaces: dict[str, WorkspaceConfig] = Field(default_factory=dict)
    template: dict[str, Any] = Field(default_factory=dict)

    def workspace(self, workspace_root: Path, home: Path | None = None) -> WorkspaceConfig | None:
        """Find the settings of a workspace by its root directory."""
        for key, workspace in self.workspaces.items():
            if expand_home(key, home) == workspace_root:
                return workspace
        return None

    def workspace_or_default(self, workspace_root: Path, home: Path | None = None) -> WorkspaceConfig:
        """Find the settings of a workspace, inserting empty ones if missing."""
        workspace = self.workspace(workspace_root, home)
        if workspace is None:
            workspace = WorkspaceConfig()
            self.workspaces[compress_home(workspace_root, home)] = workspace
        return workspace

    def template_files(self, directory: Path) -> dict[Path, str]:
        """Flatten the `template` table into file paths under a directory.

        Raises:
            ConfigError: If an entry is neither a string nor a table
        """
        files: dict[Path, str] = {}
        queue: list[tuple[Path, Any]] = [(directory / k, v) for k, v in self.template.items()]
        while queue:
            path, content = queue.pop(0)
            if isinstance(content, str):
                files[path] = content
            elif isinstance(content, dict):
                queue.extend((path / k, v) for k, v in content.items())
            else:
                raise ConfigError(
                    f"`template` entries must be strings or tables: {path.relative_to(directory)}"
                )
        return files

    def template_manifest(self) -> str:
        """Get the manifest of the `template` table.

        Raises:
            ConfigError: If `template."Cargo.toml"` is missing or not a string
        """
        manifest = self.template.get(MANIFEST_FILE_NAME)
        if manifest is None:
            raise ConfigError(f'missing `template."{MANIFEST_FILE_NAME}"`')
        if not isinstance(manifest, str):
            raise ConfigError(f'expected string: `template."{MANIFEST_FILE_NAME}"`')
        return manifest


def default_config(data_dir: Path, home: Path | None = None) -> BikecaseConfig:
    """Build the configuration written on first use.

    Args:
        data_dir: Directory holding the token file and the default workspace
        home: Home directory used to compress paths
    """
    default = compress_home(data_dir / "default-workspace", home)
    return BikecaseConfig(
        default=default,
        github_token=GithubTokenConfig(path=compress_home(data_dir / "github-token", home)),
        workspaces={default: WorkspaceConfig()},
        template={
            MANIFEST_FILE_NAME: TEMPLATE_PACKAGE_MANIFEST,
            "src": {"main.rs": TEMPLATE_SCRIPT},
        },
    )


def load_config(config_path: Path) -> BikecaseConfig:
    """Load config from a TOML file.

    Raises:
        ConfigError: If the file cannot be parsed or validated
    """
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return BikecaseConfig.model_validate(data)
    except OSError as e:
        raise ConfigError(f"failed to read {config_path}") from e
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"failed to parse the TOML file at {config_path}") from e


def save_config(config: BikecaseConfig, config_path: Path, dry_run: bool = False) -> None:
    """Write config to a TOML file."""
    filesystem.create_dir_all(config_path.parent, dry_run)
    content = tomli_w.dumps(config.model_dump(exclude_none=True))
    filesystem.write(config_path, content, dry_run)


def load_or_create_config(
    config_path: Path,
    dry_run: bool = False,
    home: Path | None = None,
) -> BikecaseConfig:
    """Load config, writing the default one first if the file doesn't exist."""
    if config_path.exists():
        return load_config(config_path)
    config = default_config(config_path.parent, home)
    logger.info(f"Creating a new config file: {config_path}")
    save_config(config, config_path, dry_run)
    return config
