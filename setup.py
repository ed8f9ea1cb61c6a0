"""Setuptools build hooks for ndsub."""

from __future__ import annotations

from setuptools import setup

# Metadata lives in pyproject.toml. The package is pure Python, so the default
# command classes are kept and wheels are tagged ``py3-none-any``.
setup()
