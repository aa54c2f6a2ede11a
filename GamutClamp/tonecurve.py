# -*- coding: utf-8 -*-

"""
Tone response curves.

Every curve maps normalized input 0..1 to normalized output. Calibration
target curves (sRGB, gamma, L*) are rescaled so that 0 maps to the display
black level and 1 maps to 1. Table and parametric curves represent ICC TRC
tags as they are stored in the profile.

"""

import math

import numpy

from GamutClamp import colormath
from GamutClamp.log import get_logger

logger = get_logger(__name__)


class UnsupportedGammaKindError(ValueError):
	pass


class ToneCurve(object):

	black = 0.0

	def __repr__(self):
		return "%s(%s)" % (self.__class__.__name__,
						   ", ".join("%s=%r" % item for item in
									 sorted(vars(self).items())
									 if not item[0].startswith("_")))

	def sample_at(self, x):
		raise NotImplementedError()

	def sample_inverse_at(self, y, iterations=64):
		"""
		Return the input that produces output 'y'.

		Generic bisection for monotonically non-decreasing curves. Outputs
		outside the curve's range return 0 or 1.

		"""
		if y <= self.sample_at(0.0):
			return 0.0
		if y >= self.sample_at(1.0):
			return 1.0
		lo, hi = 0.0, 1.0
		for i in range(iterations):
			mid = (lo + hi) / 2.0
			if self.sample_at(mid) < y:
				lo = mid
			else:
				hi = mid
		return (lo + hi) / 2.0


def _check_black(black):
	if not 0.0 <= black < 1.0:
		raise ValueError("Black level must be in range 0..1, got %r" % black)
	return float(black)


def _clamp(v, vmin=0.0, vmax=1.0):
	return min(max(v, vmin), vmax)


class SrgbEOTF(ToneCurve):

	""" IEC 61966-2-1 sRGB EOTF rescaled to black..1 """

	def __init__(self, black=0.0):
		self.black = _check_black(black)

	def sample_at(self, x):
		return self.black + (1.0 - self.black) * colormath.specialpow(x, -2.4)

	def sample_inverse_at(self, y):
		v = _clamp((y - self.black) / (1.0 - self.black))
		return colormath.specialpow(v, 1.0 / -2.4)


class GammaToneCurve(ToneCurve):
	# Black offset handling adapted from ArgyllCMS xicc/xicc.c (BT.1886)

	"""
	Power curve with black level.

	'outoffset' is the proportion (0..1) of the black level added at the
	output. The balance is applied as an input offset, which lifts the
	shadows along the power curve instead of adding a flat pedestal.
	outoffset = 1 gives black + (1 - black) * x ** gamma, outoffset = 0 with
	gamma 2.4 is BT.1886.

	If 'relative' is True, 'gamma' is the effective gamma at 50% input and
	the technical exponent is solved for.

	"""

	def __init__(self, gamma, black=0.0, outoffset=1.0, relative=False):
		if gamma <= 0:
			raise ValueError("Gamma must be positive, got %r" % gamma)
		if not 0.0 <= outoffset <= 1.0:
			raise ValueError("Output offset must be in range 0..1, got %r" %
							 outoffset)
		self.black = _check_black(black)
		self.outoffset = float(outoffset)
		self.relative = bool(relative)
		self.effective_gamma = float(gamma)
		if relative:
			gamma = colormath.xicc_tech_gamma(gamma, self.black, outoffset)
			logger.debug("Technical gamma %.6f for effective gamma %s",
						 gamma, self.effective_gamma)
		self.gamma = float(gamma)

		# Offset acounted for in output
		self._outo = self.black * self.outoffset
		# Balance of offset accounted for in input
		ino = self.black - self._outo
		# Input offset black to 1/pow
		bkipow = math.pow(ino, 1.0 / self.gamma)
		# Input offset white to 1/pow
		wtipow = math.pow(1.0 - self._outo, 1.0 / self.gamma)
		# non-linear Y that makes input offset proportion of black point
		self._ingo = bkipow / (wtipow - bkipow)
		# Scale to make input of 1 map to 1.0 - self._outo
		self._outsc = math.pow(wtipow - bkipow, self.gamma)

	def sample_at(self, x):
		vv = x + self._ingo
		if vv > 0.0:
			vv = self._outsc * math.pow(vv, self.gamma)
		else:
			vv = 0.0
		return vv + self._outo

	def sample_inverse_at(self, y):
		vv = y - self._outo
		if vv <= 0.0:
			return 0.0
		return _clamp(math.pow(vv / self._outsc, 1.0 / self.gamma) -
					  self._ingo)


class LstarEOTF(ToneCurve):

	""" CIE L* curve rescaled to black..1 """

	def __init__(self, black=0.0):
		self.black = _check_black(black)

	def sample_at(self, x):
		return self.black + (1.0 - self.black) * colormath.specialpow(x, -3.0)

	def sample_inverse_at(self, y):
		v = _clamp((y - self.black) / (1.0 - self.black))
		return colormath.specialpow(v, 1.0 / -3.0)


class TableToneCurve(ToneCurve):

	"""
	Linearly interpolated 16-bit table (ICC curveType).

	'scale' stretches both axes, e.g. 65535 / 32768 for tables operating on
	u1Fixed15 encoded XYZ where 1.0 = 32768.

	"""

	def __init__(self, entries, scale=1.0):
		fp = numpy.array(entries, dtype=numpy.float64) / 65535.0
		if fp.ndim != 1 or len(fp) < 2:
			raise ValueError("Curve table needs at least two entries")
		fp.flags.writeable = False
		self._fp = fp
		self._xp = numpy.linspace(0.0, 1.0, len(fp))
		self._xp.flags.writeable = False
		self._monotonic = bool(numpy.all(numpy.diff(fp) >= 0))
		self.scale = float(scale)
		self.black = float(fp[0]) * self.scale

	def __len__(self):
		return len(self._fp)

	@property
	def entries(self):
		return [int(round(v * 65535)) for v in self._fp]

	def sample_at(self, x):
		return float(numpy.interp(x / self.scale, self._xp,
								  self._fp)) * self.scale

	def sample_inverse_at(self, y):
		if not self._monotonic:
			return ToneCurve.sample_inverse_at(self, y)
		return float(numpy.interp(y / self.scale, self._fp,
								  self._xp)) * self.scale


class ParametricToneCurve(ToneCurve):

	""" ICC parametricCurveType, function types 0..4 """

	numparams = {0: 1,
				 1: 3,
				 2: 4,
				 3: 5,
				 4: 7}

	def __init__(self, fntype, params):
		if not fntype in self.numparams:
			raise ValueError("Invalid parametric curve function type %r" %
							 fntype)
		if len(params) != self.numparams[fntype]:
			raise ValueError("Parametric curve type %i needs %i parameters, "
							 "got %i" % (fntype, self.numparams[fntype],
										 len(params)))
		self.fntype = fntype
		self.params = dict(zip("gabcdef", params))
		if fntype in (1, 2) and not self.params["a"]:
			raise ValueError("Parametric curve parameter 'a' must not be zero")
		if self.params["g"] <= 0:
			raise ValueError("Parametric curve gamma must be positive, got %r" %
							 self.params["g"])
		# a * v + b is linear, so the end points bound the power term
		try:
			self.black = self.sample_at(0.0)
			self.sample_at(1.0)
		except (ArithmeticError, ValueError) as exception:
			raise ValueError("Parametric curve type %i can't be evaluated: %s" %
							 (fntype, exception))

	def sample_at(self, v):
		p = self.params
		if self.fntype == 0:
			return math.pow(max(v, 0.0), p["g"])
		elif self.fntype == 1:
			# CIE 122-1966
			if v >= -p["b"] / p["a"]:
				return math.pow(max(p["a"] * v + p["b"], 0.0), p["g"])
			else:
				return 0.0
		elif self.fntype == 2:
			# IEC 61966-3
			if v >= -p["b"] / p["a"]:
				return math.pow(max(p["a"] * v + p["b"], 0.0), p["g"]) + p["c"]
			else:
				return p["c"]
		elif self.fntype == 3:
			# IEC 61966-2.1 (sRGB)
			if v >= p["d"]:
				return math.pow(max(p["a"] * v + p["b"], 0.0), p["g"])
			else:
				return p["c"] * v
		else:
			if v >= p["d"]:
				return math.pow(max(p["a"] * v + p["b"], 0.0), p["g"]) + p["e"]
			else:
				return p["c"] * v + p["f"]


def get_tone_curve(kind, black=0.0, gamma=2.2, outoffset=1.0):
	"""
	Return a calibration target curve.

	kind: 'srgb', 'bt1886', 'gamma' (absolute), 'gamma.relative' or 'lstar'.
	'gamma' and 'outoffset' are only used by the gamma kinds.

	"""
	if kind == "srgb":
		return SrgbEOTF(black)
	elif kind == "bt1886":
		return GammaToneCurve(2.4, black, 0.0)
	elif kind == "gamma":
		return GammaToneCurve(gamma, black, outoffset)
	elif kind == "gamma.relative":
		return GammaToneCurve(gamma, black, outoffset, relative=True)
	elif kind == "lstar":
		return LstarEOTF(black)
	raise UnsupportedGammaKindError("Unsupported gamma type %r" % (kind, ))
