"""Sphinx configuration for splitviolin docs."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

project = "splitviolin"
copyright = "2025, splitviolin developers"
author = "splitviolin developers"
release = "0.1.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "myst_parser",
]

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "sphinx_rtd_theme"

autodoc_member_order = "bysource"
# ipywidgets/IPython are only needed by the editor at runtime
autodoc_mock_imports = ["ipywidgets", "IPython"]

# MyST settings
myst_enable_extensions = ["colon_fence"]
