"""Sphinx build settings for the PySpecial API reference."""

from importlib.metadata import version as _installed_version

project = 'PySpecial'
author = 'PySpecial developers'
copyright = f'2026, {author}'
release = _installed_version('pyspecial')
version = '.'.join(release.split('.')[:2])

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx.ext.mathjax',
]

napoleon_google_docstrings = True
napoleon_numpy_docstrings = True
napoleon_include_init_with_doc = True
napoleon_use_rtype = False

autodoc_member_order = 'bysource'
autodoc_typehints = 'description'
autodoc_default_options = {
    'members': True,
    'exclude-members': '__weakref__',
}

exclude_patterns = ['_build']

html_theme = 'furo'
html_title = f'PySpecial {release}'
html_theme_options = {
    'light_css_variables': {
        'color-brand-primary': '#2c6fbb',
        'color-brand-content': '#1d4f8a',
    },
    'dark_css_variables': {
        'color-brand-primary': '#5b9be0',
        'color-brand-content': '#2c6fbb',
    },
}

intersphinx_mapping = {
    name: (url, None)
    for name, url in (
        ('python', 'https://docs.python.org/3'),
        ('numpy', 'https://numpy.org/doc/stable/'),
        ('scipy', 'https://docs.scipy.org/doc/scipy/'),
    )
}
