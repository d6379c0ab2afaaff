import re
from setuptools import setup

__version__ ,= re.findall('__version__: str = "(.*)"', open('doomfront/__init__.py').read())

setup(
    name = "doomfront",
    version = __version__,
    packages = ['doomfront'],

    requires = [],
    install_requires = [],

    extras_require = {
        "regex": ["regex"],
    },

    package_data = {'doomfront': ['py.typed']},

    test_suite = 'tests.__main__',

    python_requires = ">=3.7",

    # metadata for upload to PyPI
    author = "Jerome Martina",
    description = "Frontends for Doom source port domain-specific languages",
    license = "MIT OR Apache-2.0",
    keywords = "doom zdoom cvarinfo parser frontend dsl",
    url = "https://github.com/j-martina/doom-front",
    long_description='''
doomfront parses the domain-specific languages of Doom's source ports.

It currently reads ZDoom's CVARINFO lump:

 - Hand-written ordered-choice parser, one pass, no partial results
 - Typed, immutable AST with source spans on every node
 - Thread-safe string interner for identifiers, shareable between parses
 - Errors pinpoint the furthest position reached and what was expected there
 - JSON-compatible serialization of the AST
''',

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Compilers",
        "Topic :: Games/Entertainment :: First Person Shooters",
        "Topic :: Text Processing :: General",
        "License :: OSI Approved :: MIT License",
        "License :: OSI Approved :: Apache Software License",
    ],
)
