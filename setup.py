# -*- coding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

dependencies = [
    "click",
    "numpy",
    "matplotlib",
    "clicktool @ git+https://git@github.com/jakeogh/clicktool",
    "asserttool @ git+https://git@github.com/jakeogh/asserttool",
    "click_auto_help @ git+https://git@github.com/jakeogh/click-auto-help",
    "configtool @ git+https://git@github.com/jakeogh/configtool",
    "eprint @ git+https://git@github.com/jakeogh/eprint",
    "globalverbose @ git+https://git@github.com/jakeogh/globalverbose",
    "unmp @ git+https://git@github.com/jakeogh/unmp",
]

config = {
    "version": "0.1",
    "name": "mpminicharts",
    "url": "https://github.com/jakeogh/mpminicharts",
    "license": "ISC",
    "author": "Justin Keogh",
    "author_email": "github.com@v6y.net",
    "description": "bar, pie and polar minicharts on matplotlib maps",
    "long_description": __doc__,
    "packages": find_packages(exclude=["tests"]),
    "package_data": {"mpminicharts": ["py.typed"]},
    "include_package_data": True,
    "zip_safe": False,
    "platforms": "any",
    "install_requires": dependencies,
    "extras_require": {"test": ["pytest"]},
    "entry_points": {
        "console_scripts": [
            "mpminicharts=mpminicharts.cli:cli",
        ],
    },
}

setup(**config)
