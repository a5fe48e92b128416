#!/usr/bin/env python3
"""
Import verification for every module of the package.

A broken relative import only fails when its module is first loaded, so
each module is imported on its own here.
"""

import importlib
import pkgutil

import pytest

import media_gallery

MODULES = sorted(
    info.name
    for info in pkgutil.walk_packages(media_gallery.__path__, prefix="media_gallery.")
)


@pytest.mark.unit
def test_package_tree_was_discovered():
    assert "media_gallery.services.thumbnail_pipeline.thumbnail_pipeline" in MODULES
    assert "media_gallery.main" in MODULES


@pytest.mark.unit
@pytest.mark.parametrize("module_name", MODULES)
def test_module_imports(module_name):
    importlib.import_module(module_name)
