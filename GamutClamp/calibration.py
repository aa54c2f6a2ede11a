# -*- coding: utf-8 -*-

"""
Combine color spaces, profiles and tone curves into the coefficients that
get programmed into the display pipeline.

The pipeline is de-gamma table -> 3x3 matrix -> re-gamma table. Without a
profile only the matrix is used.

"""

from collections import namedtuple

from GamutClamp import colorimetry
from GamutClamp.ICCProfile import ICCProfile
from GamutClamp.config import getcfg
from GamutClamp.log import get_logger
from GamutClamp.tonecurve import get_tone_curve

logger = get_logger(__name__)


class ConversionPlan(namedtuple("ConversionPlan", "matrix degamma regamma")):

	"""
	matrix: 3x3 colormath.Matrix
	degamma, regamma: None or 3 tuples of floats (one per channel)

	"""

	__slots__ = ()


def _sample_curves(fn, curves, size):
	if size < 2:
		raise ValueError("Table size must be at least 2, got %r" % size)
	return tuple(tuple(fn(curve, i / (size - 1.0)) for i in range(size))
				 for curve in curves)


def matrix_conversion(display_space, target):
	""" Plan converting content in 'target' to the display's native RGB """
	return ConversionPlan(colorimetry.rgb_to_rgb(target, display_space),
						  None, None)


def icc_conversion(profile, target, curve=None, size=1024):
	"""
	Plan converting content in 'target' through a display profile.

	Content is linearized with 'curve' (or the profile's own tone curves),
	converted to the display's linear RGB via the PCS and encoded again with
	the inverse profile tone curves.

	"""
	matrix = profile.matrix.inverted() * colorimetry.rgb_to_pcs_xyz(target)
	if curve is None:
		degamma_curves = profile.trcs
	else:
		degamma_curves = (curve, curve, curve)
	degamma = _sample_curves(lambda curve, x: curve.sample_at(x),
							 degamma_curves, size)
	regamma = _sample_curves(lambda curve, y: curve.sample_inverse_at(y),
							 profile.trcs, size)
	logger.debug("ICC conversion matrix %r, de-gamma %r", matrix,
				 degamma_curves)
	return ConversionPlan(matrix, degamma, regamma)


def get_target_color_space():
	""" Return the configured target, optionally scaled toward D65 """
	target = colorimetry.get_color_space(getcfg("target"))
	if getcfg("target.scale"):
		target = colorimetry.scaled_color_space(
			target, [getcfg("target.scale." + component) for component in
					 ("red", "green", "blue")])
	return target


def get_calibration_curve(black=0.0):
	""" Return the configured calibration tone curve for a black level """
	return get_tone_curve(getcfg("calibration.trc"), black,
						  getcfg("calibration.gamma"),
						  getcfg("calibration.outoffset") / 100.0)


def create_conversion(display_space=None, profile=None):
	"""
	Create a conversion plan from the current configuration.

	Uses 'profile' (or the one at config profile.path) if profile.use_icc is
	set, otherwise 'display_space'. Returns None if there is nothing to
	convert.

	"""
	target = get_target_color_space()
	if getcfg("profile.use_icc"):
		if profile is None:
			path = getcfg("profile.path")
			if not path:
				logger.info("No display profile configured")
				return None
			profile = ICCProfile.from_file(path)
		curve = None
		if getcfg("calibration.enabled"):
			curve = get_calibration_curve(profile.black_luminance())
		return icc_conversion(profile, target, curve, getcfg("lut.size"))
	if display_space is None:
		raise ValueError("Display color space required without profile")
	if colorimetry.is_same_color_space(display_space, target):
		logger.info("Display color space matches target %s, nothing to do",
					colorimetry.get_color_space_name(getcfg("target")))
		return None
	return matrix_conversion(display_space, target)
