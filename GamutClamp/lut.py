# -*- coding: utf-8 -*-

"""
16-bit lookup table: per-channel input curves, a cubic lattice of 3-channel
samples and per-channel output curves.

Lattice samples are u1Fixed15 encoded (1.0 = 32768), the encoding ICC
lut16Type uses for XYZ.

"""

import math

import numpy

from GamutClamp.colormath import Vector
from GamutClamp.log import get_logger
from GamutClamp.tonecurve import TableToneCurve

logger = get_logger(__name__)

INPUT_ENTRIES = 65536


class InvalidLatticeError(ValueError):
	pass


def tetrahedron(fx, fy, fz):
	"""
	Return the four corners and weights for tetrahedral interpolation.

	fx, fy, fz are the fractional positions inside the lattice cell. The cell
	is split into six tetrahedra along its main diagonal. The corners are
	visited from the base corner along the axis with the largest fraction,
	then the two largest, then all three. Weights are non-negative and sum
	to 1.

	Returns a tuple of ((dx, dy, dz), weight) pairs.

	"""
	# https://www.filmlight.ltd.uk/pdf/whitepapers/FL-TL-TN-0057-SoftwareLib.pdf
	if fx > fy:
		if fy > fz:
			return (((0, 0, 0), 1 - fx),
					((1, 0, 0), fx - fy),
					((1, 1, 0), fy - fz),
					((1, 1, 1), fz))
		elif fx > fz:
			return (((0, 0, 0), 1 - fx),
					((1, 0, 0), fx - fz),
					((1, 0, 1), fz - fy),
					((1, 1, 1), fy))
		else:
			return (((0, 0, 0), 1 - fz),
					((0, 0, 1), fz - fx),
					((1, 0, 1), fx - fy),
					((1, 1, 1), fy))
	else:
		if fz > fy:
			return (((0, 0, 0), 1 - fz),
					((0, 0, 1), fz - fy),
					((0, 1, 1), fy - fx),
					((1, 1, 1), fx))
		elif fz > fx:
			return (((0, 0, 0), 1 - fy),
					((0, 1, 0), fy - fz),
					((0, 1, 1), fz - fx),
					((1, 1, 1), fx))
		else:
			return (((0, 0, 0), 1 - fy),
					((0, 1, 0), fy - fx),
					((1, 1, 0), fx - fz),
					((1, 1, 1), fz))


def _uint16_array(values, what):
	try:
		array = numpy.array(values)
	except ValueError as exception:
		raise InvalidLatticeError("Malformed %s: %s" % (what, exception))
	if array.size and not numpy.issubdtype(array.dtype, numpy.number):
		raise InvalidLatticeError("Malformed %s: non-numeric values" % what)
	if array.size and not numpy.all(numpy.isfinite(array)):
		raise InvalidLatticeError("Malformed %s: non-finite values" % what)
	if array.size and numpy.any(array != numpy.round(array)):
		raise InvalidLatticeError("Malformed %s: non-integral values" % what)
	if array.size and (array.min() < 0 or array.max() > 65535):
		raise InvalidLatticeError("%s values out of range 0..65535" %
								  what.capitalize())
	array = array.astype(numpy.uint16)
	array.flags.writeable = False
	return array


class Lut16(object):

	"""
	Immutable 16-bit LUT transform.

	input_curves: 3 x 65536 table mapping 16-bit device values to 16-bit
	linear values.
	lattice: S x S x S x 3 samples (S >= 2), first axis red.
	output_curves: 3 tone curves applied to the interpolated samples.

	"""

	def __init__(self, input_curves, lattice, output_curves):
		lattice = _uint16_array(lattice, "lattice")
		if (lattice.ndim != 4 or lattice.shape[3] != 3 or
			not lattice.shape[0] == lattice.shape[1] == lattice.shape[2]):
			raise InvalidLatticeError("Lattice must be S x S x S x 3, got %s" %
									  "x".join(str(n) for n in lattice.shape))
		if lattice.shape[0] < 2:
			raise InvalidLatticeError("Lattice needs at least 2 grid points "
									  "per axis, got %i" % lattice.shape[0])
		input_curves = _uint16_array(input_curves, "input curves")
		if input_curves.shape != (3, INPUT_ENTRIES):
			raise InvalidLatticeError("Input curves must be 3 x %i, got %s" %
									  (INPUT_ENTRIES,
									   "x".join(str(n) for n in
												input_curves.shape)))
		output_curves = tuple(output_curves)
		if len(output_curves) != 3:
			raise InvalidLatticeError("Expected 3 output curves, got %i" %
									  len(output_curves))
		if numpy.any(numpy.diff(input_curves.astype(numpy.int32), axis=1) < 0):
			logger.warning("Warning: Input curves are not monotonically "
						   "increasing")
		self._input = input_curves
		self._lut = lattice
		self._lut_size = lattice.shape[0]
		self._output = output_curves

	@classmethod
	def from_mft2(cls, input_tables, clut, output_tables):
		"""
		Create from the tables of an ICC lut16Type with 3 input and 3 output
		channels.

		Input tables of any length are resampled to 65536 entries. 'clut' is
		the flat or nested list of grid points as stored in the tag (first
		input channel varies slowest). Output tables operate on the XYZ PCS
		encoding and become table curves scaled accordingly.

		"""
		if len(input_tables) != 3 or len(output_tables) != 3:
			raise InvalidLatticeError("Expected 3 input and 3 output tables")
		inputs = []
		x = numpy.arange(INPUT_ENTRIES, dtype=numpy.float64)
		for table in input_tables:
			if len(table) < 2:
				raise InvalidLatticeError("Input table needs at least two "
										  "entries")
			xp = numpy.linspace(0.0, INPUT_ENTRIES - 1.0, len(table))
			inputs.append(numpy.round(numpy.interp(x, xp, table)))
		clut = numpy.array(clut)
		size = int(round((clut.size // 3) ** (1.0 / 3.0)))
		if size ** 3 * 3 != clut.size:
			raise InvalidLatticeError("cLUT with %i values is not cubic" %
									  clut.size)
		lattice = clut.reshape((size, size, size, 3))
		outputs = [TableToneCurve(table, 65535.0 / 32768.0)
				   for table in output_tables]
		return cls(inputs, lattice, outputs)

	@property
	def input_curves(self):
		return self._input

	@property
	def lattice(self):
		return self._lut

	@property
	def output_curves(self):
		return self._output

	@property
	def size(self):
		""" Return number of grid points per dimension. """
		return self._lut_size

	def sample_grayscale_at(self, index):
		return self.sample_at(index, index, index)

	def sample_at(self, r, g, b):
		""" Transform 16-bit device RGB, return normalized output RGB """
		rgb = []
		for channel, v in enumerate((r, g, b)):
			if not 0 <= v < INPUT_ENTRIES:
				raise ValueError("Device value %r out of range 0..%i" %
								 (v, INPUT_ENTRIES - 1))
			rgb.append(self._input[channel, int(v)] / 65535.0)

		result = self.interpolate(rgb)

		return Vector(curve.sample_at(v) for curve, v in
					  zip(self._output, result))

	def _sample(self, x, y, z):
		x = min(x, self._lut_size - 1)
		y = min(y, self._lut_size - 1)
		z = min(z, self._lut_size - 1)
		return self._lut[x, y, z] / 32768.0

	def interpolate(self, rgb):
		"""
		Tetrahedral interpolation of normalized RGB, return the lattice
		value normalized to 1.0 = 32768 as Vector

		"""
		n = []
		f = []
		for v in rgb:
			index = min(max(v, 0.0), 1.0) * (self._lut_size - 1)
			# Keep n + 1 inside the lattice
			base = min(int(math.floor(index)), self._lut_size - 2)
			n.append(base)
			f.append(index - base)

		result = numpy.zeros(3)
		for (dx, dy, dz), weight in tetrahedron(*f):
			result += weight * self._sample(n[0] + dx, n[1] + dy, n[2] + dz)
		return Vector(float(v) for v in result)
