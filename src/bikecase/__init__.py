"""bikecase: keep single-file Rust scripts in a Cargo workspace."""

__version__ = "0.1.0"
