# -*- coding: utf-8 -*-

"""
Chromaticity based RGB color spaces and conversion matrices between them.

A color space is given by the CIE 1931 xy chromaticities of its three
primaries and its white point. The RGB to XYZ matrix is derived by solving
for the primaries' luminances so that RGB 1, 1, 1 maps to the white point
at Y = 1 (http://brucelindbloom.com/Eqn_RGB_XYZ_Matrix.html).

"""

from collections import namedtuple

from GamutClamp import colormath
from GamutClamp.log import get_logger

logger = get_logger(__name__)


class InvalidTargetError(IndexError):
	pass


class Point(namedtuple("Point", "x y")):

	""" CIE 1931 xy chromaticity coordinate """

	__slots__ = ()

	@classmethod
	def from_XYZ(cls, X, Y, Z):
		x, y, Y = colormath.XYZ2xyY(X, Y, Z)
		return cls(x, y)

	@property
	def XYZ(self):
		""" XYZ at Y = 1 """
		return colormath.xyY2XYZ(self.x, self.y, 1.0)


class ColorSpace(namedtuple("ColorSpace", "red green blue white")):

	""" Three primaries and a white point. Equality is exact. """

	__slots__ = ()

	@property
	def primaries(self):
		return self.red, self.green, self.blue


D50 = Point(0.3457, 0.3585)
D65 = Point(0.3127, 0.3290)

# Display targets in selection order
COLOR_SPACES = (
	("sRGB", ColorSpace(Point(0.64, 0.33), Point(0.30, 0.60),
						Point(0.15, 0.06), D65)),
	("DCI-P3", ColorSpace(Point(0.68, 0.32), Point(0.265, 0.69),
						  Point(0.15, 0.06), D65)),
	("Adobe RGB", ColorSpace(Point(0.64, 0.33), Point(0.21, 0.71),
							 Point(0.15, 0.06), D65)),
	("Rec. 2020", ColorSpace(Point(0.708, 0.292), Point(0.17, 0.797),
							 Point(0.131, 0.046), D65)),
)


def get_color_space(index):
	""" Return the registered color space at position 'index' """
	if not isinstance(index, int) or not 0 <= index < len(COLOR_SPACES):
		raise InvalidTargetError("Invalid target color space %r (expected 0..%i)"
								 % (index, len(COLOR_SPACES) - 1))
	return COLOR_SPACES[index][1]


def get_color_space_name(index):
	get_color_space(index)
	return COLOR_SPACES[index][0]


def color_space_from_chromaticity(rx, ry, gx, gy, bx, by, white=D65,
								  digits=3):
	"""
	Create a color space from decoded EDID chromaticity coordinates.

	EDID stores chromaticity with 10 bit precision, so coordinates are rounded
	to three digits. The white point defaults to D65 because EDID white points
	are rarely trustworthy.

	"""
	return ColorSpace(Point(round(rx, digits), round(ry, digits)),
					  Point(round(gx, digits), round(gy, digits)),
					  Point(round(bx, digits), round(by, digits)),
					  white)


def is_same_color_space(space1, space2, digits=4):
	""" Compare two color spaces with fields rounded to n digits """
	if digits is None:
		return space1 == space2
	return (colormath.is_equal(_flatten(space1), _flatten(space2),
							   lambda v: round(v, digits)))


def _flatten(space):
	values = []
	for point in space:
		values.extend(point)
	return values


def scaled_color_space(base, scalers, anchor=D65):
	"""
	Return a copy of 'base' with each primary moved toward 'anchor'.

	'scalers' are the red, green and blue percentages. 100 leaves a primary
	untouched, 0 collapses it onto the anchor.

	"""
	if len(scalers) != 3:
		raise ValueError("Expected three scalers, got %i" % len(scalers))
	primaries = []
	for primary, scaler in zip(base.primaries, scalers):
		primaries.append(Point(anchor.x + (primary.x - anchor.x) * scaler / 100.0,
							   anchor.y + (primary.y - anchor.y) * scaler / 100.0))
	return ColorSpace(primaries[0], primaries[1], primaries[2], base.white)


def rgb_to_xyz(space):
	""" Return the RGB to XYZ matrix of a color space (white Y = 1) """
	return colormath.rgb_to_xyz_matrix(space.red.x, space.red.y,
									   space.green.x, space.green.y,
									   space.blue.x, space.blue.y,
									   space.white.XYZ)


def rgb_to_pcs_xyz(space, cat="Bradford"):
	""" Return the RGB to D50 XYZ (ICC PCS) matrix of a color space """
	matrix = rgb_to_xyz(space)
	if space.white == D50:
		return matrix
	return colormath.wp_adaption_matrix(space.white.XYZ, "D50", cat) * matrix


def rgb_to_rgb(source, target, cat="Bradford"):
	"""
	Return the matrix converting linear RGB in 'source' to linear RGB in
	'target'.

	Whites that differ are adapted with 'cat'.

	"""
	source_matrix = rgb_to_xyz(source)
	target_matrix = rgb_to_xyz(target)
	if source.white != target.white:
		source_matrix = colormath.wp_adaption_matrix(source.white.XYZ,
													 target.white.XYZ,
													 cat) * source_matrix
	matrix = target_matrix.inverted() * source_matrix
	logger.debug("RGB to RGB matrix %r -> %r: %r", source, target, matrix)
	return matrix
