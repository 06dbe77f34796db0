"""Sphinx configuration for the DockerView API reference."""

import doctest
import os
import sys

sys.path.insert(0, os.path.abspath("../src"))

project = "DockerView"
release = "0.1.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.doctest",
    "sphinx.ext.intersphinx",
    "sphinxcontrib.spelling",
    "myst_parser",
]

exclude_patterns: list[str] = ["_build"]
master_doc = "index"
source_suffix = {".md": "markdown"}

napoleon_google_docstring = False
napoleon_numpy_docstring = True

autodoc_default_options = {"members": True, "member-order": "bysource"}
autodoc_typehints = "description"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "docker": ("https://docker-py.readthedocs.io/en/stable/", None),
    "pydantic": ("https://docs.pydantic.dev/latest/", None),
    "rich": ("https://rich.readthedocs.io/en/stable/", None),
}

# Names used by the Examples sections of the documented modules
doctest_default_flags = doctest.ELLIPSIS | doctest.NORMALIZE_WHITESPACE
doctest_global_setup = """
from dockerview import decode_stats, format_bytes
from dockerview.config import DockerSettings, LoggingSettings, MonitoringSettings
from dockerview.docker_handler.contexts import current_context_host
from dockerview.models import ContainerRecord, RawStatsSnapshot
"""

spelling_lang = "en_US"
spelling_word_list_filename = ["spelling_wordlist.txt"]

html_theme = "sphinx_rtd_theme"
