# -*- coding: utf-8 -*-

import logging
import logging.handlers
import os
import sys
import warnings

from GamutClamp.meta import name as appname
from GamutClamp.options import debug

logging._warnings_showwarning = warnings.showwarning

if debug:
	loglevel = logging.DEBUG
else:
	loglevel = logging.INFO

logger = None
_logdir = None

# Library modules log below the application logger. Without a handler
# configured by setup_logging, records are discarded.
logging.getLogger(appname).addHandler(logging.NullHandler())


def showwarning(message, category, filename, lineno, file=None, line=""):
	# Adapted from _showwarning in Python/lib/logging/__init__.py
	"""
	Implementation of showwarnings which redirects to logging.

	If a file is specified, it will delegate to the original warnings
	implementation of showwarning. Otherwise, the formatted warning is logged
	to a warnings logger named "py.warnings" with level logging.WARNING.

	Unlike the default implementation, the line is omitted from the warning,
	and the warning does not end with a newline.
	"""
	if file is not None:
		if logging._warnings_showwarning is not None:
			logging._warnings_showwarning(message, category, filename, lineno,
										  file, line)
	else:
		s = warnings.formatwarning(message, category, filename, lineno, line)
		logger = logging.getLogger("py.warnings")
		if not logger.handlers:
			if hasattr(sys.stderr, "isatty") and sys.stderr.isatty():
				handler = logging.StreamHandler()  # Logs to stderr by default
			else:
				handler = logging.NullHandler()
			logger.addHandler(handler)
		log(s.strip(), fn=logger.warning)


class Log(object):

	def __call__(self, msg, fn=None):
		"""
		Log a message.

		Optionally use function 'fn' instead of logging.info.

		"""
		msg = msg.replace("\r\n", "\n").replace("\r", "")
		if fn is None and logger and logger.handlers:
			fn = logger.info
		if fn:
			for line in msg.split("\n"):
				fn(line)

log = Log()


def get_logger(name=None):
	""" Return a logger below the application logger """
	if not name or name == appname:
		return logging.getLogger(appname)
	if name.startswith(appname + "."):
		return logging.getLogger(name)
	return logging.getLogger("%s.%s" % (appname, name))


def get_file_logger(name, level=loglevel, when="never", backupCount=5,
					logdir=None, filename=None):
	""" Return logger object.

	A TimedRotatingFileHandler or FileHandler (if when == "never") will be used.

	"""
	if logdir is None:
		logdir = _logdir
	logger = get_logger(name)
	if not filename:
		filename = name or appname
	logfile = os.path.join(logdir, filename + ".log")
	for handler in logger.handlers:
		if (isinstance(handler, logging.FileHandler) and
			handler.baseFilename == os.path.abspath(logfile)):
			return logger
	logger.setLevel(level)
	if not os.path.exists(logdir):
		try:
			os.makedirs(logdir)
		except OSError as exception:
			print("Warning - log directory '%s' could not be created: %s" %
				  (logdir, exception), file=sys.stderr)
			return logger
	try:
		if when != "never":
			filehandler = logging.handlers.TimedRotatingFileHandler(logfile,
																	when=when,
																	backupCount=backupCount)
		else:
			filehandler = logging.FileHandler(logfile, "a")
	except OSError as exception:
		print("Warning - logging to file '%s' not possible: %s" %
			  (logfile, exception), file=sys.stderr)
	else:
		fileformatter = logging.Formatter("%(asctime)s %(message)s")
		filehandler.setFormatter(fileformatter)
		logger.addHandler(filehandler)
	return logger


def setup_logging(logdir, name=appname, when="midnight", backupCount=5,
				  stream=None):
	"""
	Setup the logging facility.

	Messages of all library modules end up in <logdir>/<name>.log and,
	if given, in 'stream'.

	"""
	global _logdir, logger
	_logdir = logdir
	logger = get_file_logger(appname, loglevel, when, backupCount,
							 filename=name)
	if stream is not None:
		streamhandler = logging.StreamHandler(stream)
		streamformatter = logging.Formatter("%(asctime)s %(message)s")
		streamhandler.setFormatter(streamformatter)
		logger.addHandler(streamhandler)
	warnings.showwarning = showwarning
	return logger
