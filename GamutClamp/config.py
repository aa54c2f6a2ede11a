# -*- coding: utf-8 -*-

"""
Runtime configuration and user settings parser

"""

import configparser
import io
import os

from GamutClamp.log import get_logger
from GamutClamp.options import debug

logger = get_logger(__name__)

# User settings

cfg = configparser.RawConfigParser()
cfg.optionxform = str

cfginited = {}

valid_ranges = {
	"calibration.gamma": [0.000001, 10],
	"calibration.outoffset": [0.0, 100.0],
	"lut.size": [2, 65536],
	"target.scale.blue": [0.0, 100.0],
	"target.scale.green": [0.0, 100.0],
	"target.scale.red": [0.0, 100.0],
}

valid_values = {
	"calibration.enabled": [0, 1],
	"calibration.trc": ["srgb", "bt1886", "gamma", "gamma.relative", "lstar"],
	"profile.use_icc": [0, 1],
	"target.scale": [0, 1],
}

defaults = {
	"calibration.enabled": 0,
	"calibration.gamma": 2.2,
	# Percentage of the display black level applied after the power curve
	"calibration.outoffset": 100.0,
	"calibration.trc": "srgb",
	"lut.size": 1024,
	"profile.path": "",
	"profile.use_icc": 0,
	# Index into colorimetry.COLOR_SPACES
	"target": 0,
	"target.scale": 0,
	"target.scale.blue": 100.0,
	"target.scale.green": 100.0,
	"target.scale.red": 100.0,
}


def getcfg(name, fallback=True, raw=False, cfg=cfg):
	"""
	Get and return an option value from the configuration.

	If fallback evaluates to True and the option is not set,
	return its default value.

	"""
	value = None
	hasdef = name in defaults
	if hasdef:
		defval = defaults[name]
		deftype = type(defval)
	if cfg.has_option(configparser.DEFAULTSECT, name):
		value = cfg.get(configparser.DEFAULTSECT, name)
		# Check for invalid types and return default if wrong type
		if raw:
			pass
		elif hasdef and deftype in (int, float):
			try:
				value = deftype(value)
			except ValueError:
				value = defval
			else:
				valid_range = valid_ranges.get(name)
				if valid_range:
					value = min(max(valid_range[0], value), valid_range[1])
				elif name in valid_values and value not in valid_values[name]:
					value = defval
		elif name in valid_values and value not in valid_values[name]:
			if debug:
				logger.debug("Invalid config value for %s: %s", name, value)
			value = None
	if value is None:
		if hasdef and fallback:
			value = defval
			if debug > 1:
				logger.debug("%s - falling back to %s", name, value)
		elif debug and not hasdef:
			logger.debug("Warning - unknown option: %s", name)
	return value


def hascfg(name, fallback=True, cfg=cfg):
	"""
	Check if an option name exists in the configuration.

	Returns a boolean.
	If fallback evaluates to True and the name does not exist,
	check defaults also.

	"""
	if cfg.has_option(configparser.DEFAULTSECT, name):
		return True
	elif fallback:
		return name in defaults
	return False


def initcfg(path, cfg=cfg, force_load=False):
	"""
	Initialize the configuration.

	Read in settings if the configuration file exists. Unchanged files are
	only read again if force_load evaluates to True.

	"""
	if not os.path.isfile(path):
		return False
	try:
		mtime = os.stat(path).st_mtime
	except OSError as exception:
		logger.warning("Warning - os.stat('%s') failed: %s", path, exception)
		return False
	last_checked = cfginited.get(path)
	if not force_load and mtime == last_checked:
		return False
	cfginited[path] = mtime
	if force_load:
		msg = "Force loading"
	elif last_checked:
		msg = "Reloading"
	else:
		msg = "Loading"
	logger.info("%s %s", msg, path)
	try:
		cfg.read(path, encoding="UTF-8")
	except configparser.Error as exception:
		logger.warning("Warning - could not parse configuration file %s: %s",
					   path, exception)
		return False
	return True


def setcfg(name, value, cfg=cfg):
	""" Set an option value in the configuration. """
	if value is None:
		cfg.remove_option(configparser.DEFAULTSECT, name)
	else:
		if isinstance(value, bool):
			value = int(value)
		cfg.set(configparser.DEFAULTSECT, name, str(value))


def writecfg(path, options=(), cfg=cfg):
	"""
	Write configuration file.

	If options are given, only write options starting with one of them.

	"""
	# Remove unknown options
	for name, val in cfg.items(configparser.DEFAULTSECT):
		if not name in defaults:
			logger.info("Removing unknown option: %s", name)
			setcfg(name, None, cfg=cfg)
	try:
		stream = io.StringIO()
		cfg.write(stream)
		lines = stream.getvalue().strip("\n").split("\n")
		if options:
			optionlines = []
			for optionline in lines[1:]:
				for option in options:
					if optionline.startswith(option):
						optionlines.append(optionline)
		else:
			optionlines = lines[1:]
		# Sorting works as long as config has only one section
		lines = lines[:1] + sorted(optionlines)
		with open(path, "w", encoding="UTF-8") as cfgfile:
			cfgfile.write("\n".join(lines) + "\n")
	except OSError as exception:
		logger.warning("Warning - could not write configuration file "
					   "'%s': %s", path, exception)
		return False
	return True
