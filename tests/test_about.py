"""Tests for project metadata."""

import okcolor_about


def test_metadata_summary():
    info = okcolor_about.metadata_summary()
    assert info["title"] == "OkColor"
    assert info["version"] == okcolor_about.__version__
    assert info["license"] == "LGPL-3.0-or-later"
    assert set(info) == {"title", "version", "author", "license", "description", "copyright"}
