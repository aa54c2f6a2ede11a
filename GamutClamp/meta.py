# -*- coding: utf-8 -*-

"""
	Meta information

"""

VERSION = VERSION_BASE = (0, 3, 0, 0)
VERSION_STRING = ".".join(str(n) for n in VERSION)

author = "GamutClamp contributors"
author_ascii = author
description = ("Color space conversion coefficients for hardware display "
			   "calibration")
longdesc = ("Derive 3x3 gamut conversion matrices from display primaries, "
			"parse matrix/TRC ICC display profiles and sample 16-bit lookup "
			"tables with tetrahedral interpolation, producing coefficients "
			"ready to be programmed into a GPU color pipeline.")
name = "GamutClamp"

py_minversion = (3, 8)

version = VERSION_STRING
version_short = ".".join(str(n) for n in VERSION[:3])

version_tuple = VERSION  # only ints allowed and must be exactly 4 values
