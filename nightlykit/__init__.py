"""
nightlykit - find the latest Rust nightly that ships the components you need.

Searches dated channel manifests backwards from today for the most recent
release providing every required component, and optionally installs it with
rustup or swaps it in place of an installed toolchain.
"""

__version__ = "0.1.0"
