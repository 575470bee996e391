# Configuration file for the Sphinx documentation builder.
import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

import ftnmf  # noqa: E402

# -- Project information -----------------------------------------------------
project = "ftnmf"
author = "ftnmf developers"
version = ftnmf.__version__
release = ftnmf.__version__

# -- General configuration ---------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.doctest",
    "sphinx.ext.mathjax",
    "sphinx.ext.intersphinx",
    "sphinx_autodoc_typehints",
    "sphinx_copybutton",
    "numpydoc",
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
}

# Strip the doctest prompts when copying the examples
copybutton_prompt_text = r">>> |\.\.\. "
copybutton_prompt_is_regexp = True

numpydoc_show_class_members = False
autodoc_member_order = "bysource"

exclude_patterns = ["_build", "../../ftnmf/tests/**"]
source_suffix = ".rst"
master_doc = "index"
language = "en"

# -- Options for HTML output -------------------------------------------------
html_theme = "pydata_sphinx_theme"
html_theme_options = {
    "navigation_depth": 2,
    "show_toc_level": 2,
    "show_prev_next": False,
}

autosummary_generate = True
