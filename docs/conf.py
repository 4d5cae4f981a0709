# Sphinx configuration for the automation engine API reference

import os
import sys
sys.path.insert(0, os.path.abspath('../src'))

from automation_engine import __version__  # noqa: E402

project = 'Automation Engine'
author = 'Automation Engine contributors'
copyright = f'2024, {author}'
release = __version__
version = '.'.join(release.split('.')[:2])

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

templates_path = ['_templates']
exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'
html_title = f'{project} {release}'

# The public surface lives in automation_engine.engine; keep its re-exports in source order.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'show-inheritance': True,
    'exclude-members': 'model_config,model_fields,model_computed_fields',
}
autodoc_type_aliases = {
    'EventCatalog': 'automation_engine.engine.events.EventCatalog',
    'StepLike': 'automation_engine.engine.steps.StepLike',
    'Payload': 'automation_engine.engine.manager.Payload',
}
typehints_fully_qualified = False

napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
}
