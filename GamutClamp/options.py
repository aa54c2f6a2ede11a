# -*- coding: utf-8 -*-

"""
Parse commandline options.

Note that none of these are advertised as they solely exist for testing and
development purposes.

"""

import sys

# Debug level (default: 0 = off). >= 1 prints debug messages
if "-d2" in sys.argv[1:] or "--debug=2" in sys.argv[1:]:
	debug = 2
elif ("-d1" in sys.argv[1:] or "--debug=1" in sys.argv[1:] or
	  "-d" in sys.argv[1:] or "--debug" in sys.argv[1:]):
	debug = 1
else:
	debug = 0

