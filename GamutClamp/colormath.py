# -*- coding: utf-8 -*-

"""
Diverse color mathematical functions and a small matrix type.

Note:
In most cases, unless otherwise stated RGB is linear light RGB

"""

import math
import numbers

from GamutClamp.log import get_logger

logger = get_logger(__name__)


LSTAR_E = 216.0 / 24389.0  # Intent of CIE standard, actual CIE standard = 0.008856
LSTAR_K = 24389.0 / 27.0  # Intent of CIE standard, actual CIE standard = 903.3
SRGB_K0 = 0.04045  # 0.055 / (2.4 - 1)
SRGB_P = 12.92  # get_transfer_function_phi(0.055, 2.4)


class MatrixShapeError(ValueError):
	pass


class SingularMatrixError(MatrixShapeError):
	pass


def _is_number(value):
	return isinstance(value, numbers.Number)


class Vector(list):

	""" Simple vector of numbers. Arithmetic returns new vectors. """

	def __init__(self, values=()):
		list.__init__(self, values)

	def _check(self, vector):
		if len(vector) != len(self):
			raise MatrixShapeError("Vector length mismatch: %i != %i" %
								   (len(self), len(vector)))

	def __add__(self, vector):
		self._check(vector)
		return self.__class__(a + b for a, b in zip(self, vector))

	__iadd__ = __add__

	def __sub__(self, vector):
		self._check(vector)
		return self.__class__(a - b for a, b in zip(self, vector))

	__isub__ = __sub__

	def __mul__(self, scalar):
		if not _is_number(scalar):
			return NotImplemented
		return self.__class__(v * scalar for v in self)

	__rmul__ = __mul__
	__imul__ = __mul__

	def __truediv__(self, scalar):
		if not _is_number(scalar):
			return NotImplemented
		return self.__class__(v / scalar for v in self)

	def __neg__(self):
		return self.__class__(-v for v in self)

	def map(self, fn):
		""" Apply function to every component, return new vector """
		return self.__class__(fn(v) for v in self)

	def rounded(self, digits=3):
		return self.map(lambda v: round(v, digits))


class Matrix(list):

	""" Simple matrix of numbers, stored as list of rows """

	def __init__(self, matrix=None):
		list.__init__(self)
		if matrix is not None:
			self.update(matrix)

	def update(self, matrix):
		rows = [list(row) for row in matrix]
		if not rows or not rows[0]:
			raise MatrixShapeError("Empty matrix")
		for row in rows:
			if len(row) != len(rows[0]):
				raise MatrixShapeError("Invalid number of columns: %i "
									   "(expected %i)" % (len(row),
														  len(rows[0])))
		del self[:]
		self.extend(rows)

	@classmethod
	def column(cls, values):
		""" Create a column vector (n x 1 matrix) """
		return cls([[v] for v in values])

	@classmethod
	def identity(cls, size=3):
		return cls([[1.0 if i == j else 0.0 for j in range(size)]
					for i in range(size)])

	@property
	def shape(self):
		return len(self), len(self[0])

	def _check_shape(self, matrix):
		if not isinstance(matrix, Matrix):
			matrix = Matrix(matrix)
		if matrix.shape != self.shape:
			raise MatrixShapeError("Shape mismatch: %ix%i != %ix%i" %
								   (self.shape + matrix.shape))
		return matrix

	def __add__(self, matrix):
		matrix = self._check_shape(matrix)
		return self.__class__([[a + b for a, b in zip(row1, row2)]
							   for row1, row2 in zip(self, matrix)])

	__iadd__ = __add__

	def __sub__(self, matrix):
		matrix = self._check_shape(matrix)
		return self.__class__([[a - b for a, b in zip(row1, row2)]
							   for row1, row2 in zip(self, matrix)])

	__isub__ = __sub__

	def __neg__(self):
		return self.applied(lambda v: -v)

	def __mul__(self, matrix):
		if _is_number(matrix):
			return self.applied(lambda v: v * matrix)
		if not isinstance(matrix, Matrix) and _is_number(matrix[0]):
			# Sequence of numbers, treat as column vector
			if len(matrix) != len(self[0]):
				raise MatrixShapeError("Cannot multiply %ix%i matrix with "
									   "vector of length %i" %
									   (self.shape + (len(matrix), )))
			return Vector(sum(a * b for a, b in zip(row, matrix))
						  for row in self)
		if not isinstance(matrix, Matrix):
			matrix = Matrix(matrix)
		if len(self[0]) != len(matrix):
			raise MatrixShapeError("Cannot multiply %ix%i with %ix%i matrix" %
								   (self.shape + matrix.shape))
		columns = list(zip(*matrix))
		return self.__class__([[sum(a * b for a, b in zip(row, column))
								for column in columns] for row in self])

	__imul__ = __mul__

	def __rmul__(self, scalar):
		if not _is_number(scalar):
			return NotImplemented
		return self.applied(lambda v: scalar * v)

	def __truediv__(self, scalar):
		if not _is_number(scalar):
			return NotImplemented
		return self.applied(lambda v: v / scalar)

	def adjoint(self):
		return self.cofactors().transposed()

	def applied(self, fn):
		""" Apply function to every element, return new matrix """
		return self.__class__([[fn(column) for column in row] for row in self])

	map = applied

	def cofactors(self):
		if self.shape != (3, 3):
			raise MatrixShapeError("Cofactors are only implemented for 3x3 "
								   "matrices")
		return self.__class__([[(self[1][1]*self[2][2] - self[1][2]*self[2][1]),
								-1 * (self[1][0]*self[2][2] - self[1][2]*self[2][0]),
								(self[1][0]*self[2][1] - self[1][1]*self[2][0])],
							   [-1 * (self[0][1]*self[2][2] - self[0][2]*self[2][1]),
								(self[0][0]*self[2][2] - self[0][2]*self[2][0]),
								-1 * (self[0][0]*self[2][1] -self[0][1]*self[2][0])],
							   [(self[0][1]*self[1][2] - self[0][2]*self[1][1]),
								-1 * (self[0][0]*self[1][2] - self[1][0]*self[0][2]),
								(self[0][0]*self[1][1] - self[0][1]*self[1][0])]])

	def determinant(self):
		if self.shape == (2, 2):
			return self[0][0] * self[1][1] - self[0][1] * self[1][0]
		if self.shape != (3, 3):
			raise MatrixShapeError("Determinant is only implemented for 2x2 "
								   "and 3x3 matrices")
		return ((self[0][0]*self[1][1]*self[2][2] +
				 self[1][0]*self[2][1]*self[0][2] +
				 self[0][1]*self[1][2]*self[2][0]) -
				(self[2][0]*self[1][1]*self[0][2] +
				 self[1][0]*self[0][1]*self[2][2] +
				 self[2][1]*self[1][2]*self[0][0]))

	def inverted(self):
		determinant = self.determinant()
		# Hadamard's bound: abs(determinant) <= product of row norms
		bound = 1.0
		for row in self:
			bound *= math.sqrt(sum(v * v for v in row))
		if not bound or abs(determinant) <= 1e-12 * bound:
			raise SingularMatrixError("Matrix is singular")
		if self.shape == (2, 2):
			return self.__class__([[self[1][1], -self[0][1]],
								   [-self[1][0], self[0][0]]]) / determinant
		return self.adjoint() / determinant

	def rounded(self, digits=3):
		return self.applied(lambda v: round(v, digits))

	def transposed(self):
		return self.__class__(list(zip(*self)))


cat_matrices = {"Bradford": Matrix([[ 0.89510,  0.26640, -0.16140],
									[-0.75020,  1.71350,  0.03670],
									[ 0.03890, -0.06850,  1.02960]]),
				"XYZ scaling": Matrix.identity(3)}

standard_illuminants = {
	# Standard name => illuminant name => CIE XYZ coordinates
	# (Y should always assumed to be 1.0 and is not explicitly defined)
	"ASTM E308-01": {"D50": {"X": 0.96422, "Z": 0.82521},
					 "D65": {"X": 0.95047, "Z": 1.08883}},
	"ICC": {"D50": {"X": 0.9642, "Z": 0.8249},
			"D65": {"X": 0.9505, "Z": 1.0890}},
}


def get_cat_matrix(cat="Bradford"):
	if isinstance(cat, str):
		cat = cat_matrices[cat]
	if not isinstance(cat, Matrix):
		cat = Matrix(cat)
	return cat


def get_standard_illuminant(illuminant_name="D50",
							priority=("ICC", "ASTM E308-01"), scale=1.0):
	""" Return a standard illuminant as XYZ coordinates. """
	for standard_name in priority:
		if not standard_name in standard_illuminants:
			raise ValueError('Unrecognized standard "%s"' % standard_name)
		illuminant = standard_illuminants[standard_name].get(
			illuminant_name.upper())
		if illuminant:
			return illuminant["X"] * scale, 1.0 * scale, illuminant["Z"] * scale
	raise ValueError('Unrecognized illuminant "%s"' % illuminant_name)


def get_whitepoint(whitepoint=None, scale=1.0):
	""" Return a whitepoint as XYZ coordinates """
	if isinstance(whitepoint, (list, tuple)):
		if len(whitepoint) == 2:
			# xy chromaticity
			return xyY2XYZ(whitepoint[0], whitepoint[1], scale)
		return tuple(whitepoint)
	if not whitepoint:
		whitepoint = "D50"
	return get_standard_illuminant(whitepoint, scale=scale)


def XYZ2LMS(X, Y, Z, cat="Bradford"):
	""" Convert from XYZ to cone response domain """
	cat = get_cat_matrix(cat)
	p, y, b = cat * [X, Y, Z]
	return p, y, b


def LMS_wp_adaption_matrix(whitepoint_source=None,
						   whitepoint_destination=None,
						   cat="Bradford"):
	""" Prepare a matrix to match the whitepoints in cone response domain """
	# chromatic adaption
	# based on formula http://brucelindbloom.com/Eqn_ChromAdapt.html
	cat = get_cat_matrix(cat)
	XYZWS = get_whitepoint(whitepoint_source)
	XYZWD = get_whitepoint(whitepoint_destination)
	if XYZWS[1] != XYZWD[1]:
		# make sure the scaling is identical
		XYZWD = [v / XYZWD[1] * XYZWS[1] for v in XYZWD]
	Ls, Ms, Ss = XYZ2LMS(XYZWS[0], XYZWS[1], XYZWS[2], cat)
	Ld, Md, Sd = XYZ2LMS(XYZWD[0], XYZWD[1], XYZWD[2], cat)
	return Matrix([[Ld/Ls, 0, 0], [0, Md/Ms, 0], [0, 0, Sd/Ss]])


def wp_adaption_matrix(whitepoint_source=None, whitepoint_destination=None,
					   cat="Bradford"):
	"""
	Prepare a matrix to match the whitepoints in cone response doamin and
	transform back to XYZ

	"""
	cat = get_cat_matrix(cat)
	return cat.inverted() * LMS_wp_adaption_matrix(whitepoint_source,
												   whitepoint_destination,
												   cat) * cat


def is_equal(values1, values2, quantizer=lambda v: round(v, 4)):
	""" Compare two sequences of numbers after quantizing them """
	return [quantizer(v) for v in values1] == [quantizer(v) for v in values2]


def rgb_to_xyz_matrix(rx, ry, gx, gy, bx, by, whitepoint=None, scale=1.0):
	""" Create and return an RGB to XYZ matrix. """
	whitepoint = get_whitepoint(whitepoint, scale)
	Xr, Yr, Zr = xyY2XYZ(rx, ry, scale)
	Xg, Yg, Zg = xyY2XYZ(gx, gy, scale)
	Xb, Yb, Zb = xyY2XYZ(bx, by, scale)
	Sr, Sg, Sb = Matrix(((Xr, Xg, Xb),
						 (Yr, Yg, Yb),
						 (Zr, Zg, Zb))).inverted() * whitepoint
	return Matrix(((Sr * Xr, Sg * Xg, Sb * Xb),
				   (Sr * Yr, Sg * Yg, Sb * Yb),
				   (Sr * Zr, Sg * Zg, Sb * Zb)))


def specialpow(a, b):
	"""
	Wrapper for power, sRGB and L* functions

	Positive b = power, -2.4 = sRGB, -3.0 = L*
	Reciprocal negative b = inverse (1.0 / -2.4 = inverse sRGB)

	"""
	if b >= 0.0:
		# Power curve
		if a < 0.0:
			return -math.pow(-a, b)
		return math.pow(a, b)
	if a < 0.0:
		signScale = -1.0
		a = -a
	else:
		signScale = 1.0
	if b == 1.0 / -3.0:
		# XYZ -> RGB, L* TRC
		if a <= LSTAR_E:
			v = 0.01 * a * LSTAR_K
		else:
			v = 1.16 * math.pow(a, 1.0 / 3.0) - 0.16
	elif b == 1.0 / -2.4:
		# XYZ -> RGB, sRGB TRC
		if a <= SRGB_K0 / SRGB_P:
			v = a * SRGB_P
		else:
			v = 1.055 * math.pow(a, 1.0 / 2.4) - 0.055
	elif b == -2.4:
		# RGB -> XYZ, sRGB TRC
		if a <= SRGB_K0:
			v = a / SRGB_P
		else:
			v = math.pow((a + 0.055) / 1.055, 2.4)
	elif b == -3.0:
		# RGB -> XYZ, L* TRC
		if a <= 0.08:  # E * K * 0.01
			v = 100.0 * a / LSTAR_K
		else:
			v = math.pow((a + 0.16) / 1.16, 3.0)
	else:
		raise ValueError("Invalid gamma %r" % b)
	return v * signScale


def xyY2XYZ(x, y, Y=1.0):
	"""
	Convert from xyY to XYZ.

	Based on formula from http://brucelindbloom.com/Eqn_xyY_to_XYZ.html

	Implementation Notes:
	1. Watch out for the case where y = 0. In that case, X = Y = Z = 0 is
	   returned.
	2. The output XYZ values are in the nominal range [0.0, Y[xyY]].

	"""
	if y == 0:
		return 0, 0, 0
	X = float(x * Y) / y
	Z = float((1 - x - y) * Y) / y
	return X, Y, Z


def XYZ2xyY(X, Y, Z, whitepoint=None):
	"""
	Convert from XYZ to xyY.

	Based on formula from http://brucelindbloom.com/Eqn_XYZ_to_xyY.html

	Implementation Notes:
	1. Watch out for black, where X = Y = Z = 0. In that case, x and y are set
	   to the chromaticity coordinates of the reference whitepoint.
	2. The output Y value is in the nominal range [0.0, Y[XYZ]].

	"""
	if X + Y + Z == 0:
		# We can't check for X == Y == Z == 0 because they may actually add up
		# to 0, thus resulting in ZeroDivisionError later
		x, y, Y = XYZ2xyY(*get_whitepoint(whitepoint))
		return x, y, 0.0
	x = X / float(X + Y + Z)
	y = Y / float(X + Y + Z)
	return x, y, Y


class gam_fits(object):
	# Adapted from ArgyllCMS xicc/xicc.c

	def __init__(self, wp=1.0, thyr=.2, bp=0.0):
		self.wp = wp  # 100% input target
		self.thyr = thyr  # 50% input target
		self.bp = bp  # 0% input target


def gam_fit(gf, gamma):
	# Adapted from ArgyllCMS xicc/xicc.c
	""" Signed 50% error of a gamma + input offset curve """
	t1 = math.pow(gf.bp, 1.0 / gamma)
	t2 = math.pow(gf.wp, 1.0 / gamma)
	b = t1 / (t2 - t1)  # Offset
	a = math.pow(t2 - t1, gamma)  # Gain

	# Compute 50% output for this technical gamma
	# (All values are without output offset being added in)
	return a * math.pow(0.5 + b, gamma) - gf.thyr


def xicc_tech_gamma(egamma, off, outoffset=0.0, tolerance=1e-10,
					gamma_min=0.05, gamma_max=20.0):
	# Adapted from ArgyllCMS xicc.c

	"""
	Given the effective gamma and the output offset Y,
	return the technical gamma needed for the correct 50% response.

	The 50% response falls monotonically with the technical gamma, so the
	root is bracketed and bisected.

	"""
	if off <= 0.0:
		return egamma

	# We set up targets without outo being added
	outo = off * outoffset  # Offset acounted for in output
	gf = gam_fits(wp=1.0 - outo,  # White value for 100% input
				  thyr=math.pow(0.5, egamma) - outo,  # Advertised 50% target
				  bp=off - outo)  # Black value for 0 % input

	lo, hi = gamma_min, gamma_max
	err_lo = gam_fit(gf, lo)
	err_hi = gam_fit(gf, hi)
	if err_lo * err_hi > 0:
		logger.warning("Computing effective gamma and input offset is "
					   "inaccurate (gamma %s, black %s)", egamma, off)
		return egamma
	while hi - lo > tolerance:
		mid = (lo + hi) / 2.0
		err_mid = gam_fit(gf, mid)
		if err_mid == 0:
			return mid
		if (err_mid > 0) == (err_lo > 0):
			lo, err_lo = mid, err_mid
		else:
			hi = mid
	return (lo + hi) / 2.0
