"""Constants for bikecase."""

# Info string of the fenced block holding the manifest
MANIFEST_MARKER = "cargo"
DOC_COMMENT_PREFIX = "//!"

# Manifest left in src/main.rs when a script is split into package form
DEFAULT_MANIFEST = "# Leave blank."

MANIFEST_FILE_NAME = "Cargo.toml"
RUST_EXTENSIONS = (".rs", ".crs")

GITHUB_API_URL = "https://api.github.com/"
USER_AGENT = "bikecase <https://github.com/qryxip/cargo-scripts>"

# Timeouts (seconds)
HTTP_TIMEOUT = 30
CARGO_METADATA_TIMEOUT = 120

VIRTUAL_MANIFEST = """[workspace]
members = []
exclude = []
"""

TEMPLATE_WORKSPACE_MANIFEST = """[workspace]
members = ["template"]
exclude = []
"""

TEMPLATE_PACKAGE_MANIFEST = """[package]
name = "template"
version = "0.0.0"
edition = "2018"
publish = false

[dependencies]
"""

TEMPLATE_SCRIPT = """//! ```cargo
//! # Leave blank.
//! ```

fn main() {
    todo!();
}
"""

TEMPLATE_SCRIPT_WITH_SHEBANG = "#!/usr/bin/env bikecase\n" + TEMPLATE_SCRIPT
