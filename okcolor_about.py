# -*- coding: utf-8 -*-
# OkColor: Perceptual color conversion and manipulation in Oklab / OkLCH.
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for OkColor.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "OkColor"
__description__: Final[str] = (
    "Oklab and OkLCH color space conversions, hue/chroma/lightness "
    "adjustment and perceptual color mixing."
)
__version__: Final[str] = "1.0.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "author": __author__,
        "license": __license__,
        "description": __description__,
        "copyright": __copyright__,
    }
