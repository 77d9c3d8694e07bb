# Sphinx configuration file

import os
import sys
sys.path.insert(0, os.path.abspath('../src'))

project = 'Cloud Tasks World'
copyright = '2026, Cloud Tasks World contributors'
author = 'Cloud Tasks World contributors'
release = '0.1.0'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_theme = 'sphinx_rtd_theme'
html_static_path = ['_static']

# Autodoc settings
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'special-members': '__init__',
    'undoc-members': True,
    'exclude-members': '__weakref__'
}

# Napoleon settings
napoleon_google_docstring = True
napoleon_numpy_docstring = True

# Intersphinx mapping
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
}
intersphinx_mapping['pydantic'] = ('https://docs.pydantic.dev/latest', None)
intersphinx_mapping['google-cloud-tasks'] = (
    'https://cloud.google.com/python/docs/reference/cloudtasks/latest',
    None,
)

# google-cloud-tasks pulls in grpc at import time; docs builds don't need it.
autodoc_mock_imports = ['google.cloud.tasks_v2', 'grpc']
