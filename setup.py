#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import sys

from setuptools import setup as _setup

pypath = os.path.abspath(__file__)
pydir = os.path.dirname(pypath)

sys.path.insert(0, pydir)

from GamutClamp.meta import (author_ascii, description, longdesc, name,
							 py_minversion, version)


def setup():
	requires = ["numpy (>= 1.17)"]

	packages = [name]

	attrs = {
		"author": author_ascii,
		"classifiers": [
			"Development Status :: 4 - Beta",
			"Intended Audience :: End Users/Desktop",
			"License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
			"Operating System :: OS Independent",
			"Programming Language :: Python :: 3",
			"Topic :: Multimedia :: Graphics",
		],
		"description": description,
		"extras_require": {
			"test": ["pytest"]
		},
		"install_requires": [req.replace("(", "").replace(")", "")
							 for req in requires],
		"license": "GPL v3",
		"long_description": longdesc,
		"name": name,
		"packages": packages,
		"package_dir": {
			name: name
		},
		"python_requires": ">=%s" % ".".join(str(n) for n in py_minversion),
		"provides": [name],
		"version": version
	}

	_setup(**attrs)


if __name__ == "__main__":
	setup()
