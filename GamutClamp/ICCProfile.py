# -*- coding: utf-8 -*-

"""
Reader for matrix/TRC ICC display profiles.

Only the parts needed to rebuild the display's RGB to PCS XYZ transform are
decoded: the header, the tag table, the colorant tags (rXYZ, gXYZ, bXYZ), the
tone response curve tags (rTRC, gTRC, bTRC) and optionally wtpt, desc and an
A2B0 lut16Type.

"""

import struct

from GamutClamp import colormath
from GamutClamp.log import get_logger
from GamutClamp.lut import InvalidLatticeError, Lut16
from GamutClamp.tonecurve import (GammaToneCurve, ParametricToneCurve,
								  TableToneCurve)

logger = get_logger(__name__)


class ICCProfileInvalidError(IOError):
	pass


def s15Fixed16Number(binaryString):
	return struct.unpack(">i", binaryString)[0] / 65536.0


def u8Fixed8Number(binaryString):
	return struct.unpack(">H", binaryString)[0] / 256.0


def uInt16Number(binaryString):
	return struct.unpack(">H", binaryString)[0]


def uInt32Number(binaryString):
	return struct.unpack(">I", binaryString)[0]


def XYZNumber(binaryString):
	"""
	Byte
	Offset Content Encoded as...
	0..3   CIE X   s15Fixed16Number
	4..7   CIE Y   s15Fixed16Number
	8..11  CIE Z   s15Fixed16Number
	"""
	return tuple(s15Fixed16Number(chunk) for chunk in
				 (binaryString[:4], binaryString[4:8], binaryString[8:12]))


def _check_length(tagData, length, tagSignature):
	if len(tagData) < length:
		raise ICCProfileInvalidError("Tag data for tag %r is truncated "
									 "(expected size %i, actual size %i)" %
									 (tagSignature, length, len(tagData)))


def XYZType(tagData, tagSignature):
	_check_length(tagData, 20, tagSignature)
	return XYZNumber(tagData[8:20])


def CurveType(tagData, tagSignature):
	_check_length(tagData, 12, tagSignature)
	curveEntriesCount = uInt32Number(tagData[8:12])
	curveEntries = tagData[12:]
	if curveEntriesCount == 1:
		# Gamma
		_check_length(tagData, 14, tagSignature)
		gamma = u8Fixed8Number(curveEntries[:2])
		if not gamma:
			raise ICCProfileInvalidError("Tag %r has invalid gamma 0" %
										 tagSignature)
		return GammaToneCurve(gamma)
	elif curveEntriesCount:
		# Curve
		_check_length(tagData, 12 + curveEntriesCount * 2, tagSignature)
		return TableToneCurve(struct.unpack(">%iH" % curveEntriesCount,
											curveEntries[:curveEntriesCount * 2]))
	else:
		# Identity
		return GammaToneCurve(1.0)


def ParametricCurveType(tagData, tagSignature):
	_check_length(tagData, 12, tagSignature)
	fntype = uInt16Number(tagData[8:10])
	numparams = ParametricToneCurve.numparams.get(fntype)
	if numparams is None:
		raise ICCProfileInvalidError("Tag %r has unknown parametric function "
									 "type %i" % (tagSignature, fntype))
	_check_length(tagData, 12 + numparams * 4, tagSignature)
	params = [s15Fixed16Number(tagData[12 + i * 4:16 + i * 4])
			  for i in range(numparams)]
	try:
		return ParametricToneCurve(fntype, params)
	except ValueError as exception:
		raise ICCProfileInvalidError("Tag %r: %s" % (tagSignature, exception))


def LUT16Type(tagData, tagSignature):
	"""
	Decode a lut16Type with 3 input and 3 output channels into a Lut16.

	The 3x3 matrix is only used for XYZ input and is ignored.

	"""
	_check_length(tagData, 52, tagSignature)
	i = tagData[8]  # Input channel count
	o = tagData[9]  # Output channel count
	g = tagData[10]  # cLUT grid res
	n = uInt16Number(tagData[48:50])  # Input channel entries count
	m = uInt16Number(tagData[50:52])  # Output channel entries count
	if i != 3 or o != 3:
		raise ICCProfileInvalidError("Tag %r: unsupported channel counts "
									 "%i in / %i out" % (tagSignature, i, o))
	clut_start = 52 + n * i * 2
	output_start = clut_start + g ** i * o * 2
	_check_length(tagData, output_start + m * o * 2, tagSignature)
	input_tables = [struct.unpack(">%iH" % n,
								  tagData[52 + n * 2 * z:52 + n * 2 * (z + 1)])
					for z in range(i)]
	clut = struct.unpack(">%iH" % (g ** i * o), tagData[clut_start:output_start])
	output_tables = [struct.unpack(">%iH" % m,
								   tagData[output_start + m * 2 * z:
										   output_start + m * 2 * (z + 1)])
					 for z in range(o)]
	try:
		return Lut16.from_mft2(input_tables, clut, output_tables)
	except (InvalidLatticeError, ValueError) as exception:
		raise ICCProfileInvalidError("Tag %r: %s" % (tagSignature, exception))


def TextDescriptionType(tagData, tagSignature):
	# ICC v2
	_check_length(tagData, 12, tagSignature)
	count = uInt32Number(tagData[8:12])
	_check_length(tagData, 12 + count, tagSignature)
	return tagData[12:12 + count].rstrip(b"\0").decode("ASCII", "replace")


def MultiLocalizedUnicodeType(tagData, tagSignature):
	# ICC v4, return the first record
	_check_length(tagData, 16, tagSignature)
	recordsCount = uInt32Number(tagData[8:12])
	if not recordsCount:
		return ""
	_check_length(tagData, 28, tagSignature)
	recordLength = uInt32Number(tagData[20:24])
	recordOffset = uInt32Number(tagData[24:28])
	_check_length(tagData, recordOffset + recordLength, tagSignature)
	record = tagData[recordOffset:recordOffset + recordLength]
	return record.decode("UTF-16-BE", "replace").rstrip("\0")


typeSignature2Type = {
	b"curv": CurveType,
	b"desc": TextDescriptionType,  # ICC v2
	b"mft2": LUT16Type,
	b"mluc": MultiLocalizedUnicodeType,  # ICC v4
	b"para": ParametricCurveType,
	b"XYZ ": XYZType
}

# Tag signature => allowed type signatures
tagSignature2Types = {
	b"rXYZ": (b"XYZ ", ),
	b"gXYZ": (b"XYZ ", ),
	b"bXYZ": (b"XYZ ", ),
	b"wtpt": (b"XYZ ", ),
	b"rTRC": (b"curv", b"para"),
	b"gTRC": (b"curv", b"para"),
	b"bTRC": (b"curv", b"para"),
	b"desc": (b"desc", b"mluc"),
	b"A2B0": (b"mft2", )
}

required_tags = (b"rXYZ", b"gXYZ", b"bXYZ", b"rTRC", b"gTRC", b"bTRC")


class ICCProfile(object):

	"""
	Matrix/TRC display profile.

	matrix: RGB to PCS XYZ (D50) colorant matrix, columns are rXYZ, gXYZ, bXYZ
	trcs: tone curves for R, G and B
	lut: Lut16 from an A2B0 lut16Type or None

	Initialized with a bytes object containing binary profile data. Use
	ICCProfile.from_file to read from a path.

	"""

	def __init__(self, data):
		if not data or len(data) < 132:
			raise ICCProfileInvalidError("Not enough data")

		if data[36:40] != b"acsp":
			raise ICCProfileInvalidError("Profile signature mismatch - "
										 "expected 'acsp', found %r" %
										 data[36:40])

		header = data[:128]
		self.size = uInt32Number(header[0:4])
		if self.size < 132:
			raise ICCProfileInvalidError("Invalid profile size %i" % self.size)
		if self.size > len(data):
			raise ICCProfileInvalidError("Profile is truncated (expected size "
										 "%i, actual size %i)" %
										 (self.size, len(data)))
		data = data[:self.size]
		self.preferredCMM = header[4:8]
		self.version = float("%i.%i%i" % (header[8], header[9] >> 4,
										  header[9] & 0xf))
		self.profileClass = header[12:16].decode("ASCII", "replace")
		self.colorSpace = header[16:20].decode("ASCII", "replace").strip()
		self.connectionColorSpace = header[20:24].decode("ASCII",
														 "replace").strip()
		if self.profileClass != "mntr":
			raise ICCProfileInvalidError("Unsupported profile class %r "
										 "(expected display profile)" %
										 self.profileClass)
		if self.colorSpace != "RGB" or self.connectionColorSpace != "XYZ":
			raise ICCProfileInvalidError("Unsupported color spaces %s -> %s "
										 "(expected RGB -> XYZ)" %
										 (self.colorSpace,
										  self.connectionColorSpace))
		self.illuminant = XYZNumber(header[68:80])

		tags = self._read_tags(data)

		missing = [tagSignature.decode("ASCII") for tagSignature in
				   required_tags if not tagSignature in tags]
		if missing:
			raise ICCProfileInvalidError("Missing required tags: %s" %
										 ", ".join(missing))

		rXYZ, gXYZ, bXYZ = [tags[tagSignature] for tagSignature in
							(b"rXYZ", b"gXYZ", b"bXYZ")]
		self.matrix = colormath.Matrix([[rXYZ[0], gXYZ[0], bXYZ[0]],
										[rXYZ[1], gXYZ[1], bXYZ[1]],
										[rXYZ[2], gXYZ[2], bXYZ[2]]])
		self.trcs = tuple(tags[tagSignature] for tagSignature in
						  (b"rTRC", b"gTRC", b"bTRC"))
		self.whitepoint = tags.get(b"wtpt")
		self.description = tags.get(b"desc", "")
		self.lut = tags.get(b"A2B0")

		white = self.matrix * [trc.sample_at(1.0) for trc in self.trcs]
		if not colormath.is_equal(white, self.illuminant,
								  lambda v: round(v, 2)):
			logger.warning("Warning: Colorant sum %r does not match PCS "
						   "illuminant %r", tuple(white), self.illuminant)
		logger.debug("Profile %r: version %s, matrix %r, trcs %r",
					 self.description, self.version, self.matrix, self.trcs)

	def _read_tags(self, data):
		tagCount = uInt32Number(data[128:132])
		tagTable = data[132:132 + tagCount * 12]
		if len(tagTable) < tagCount * 12:
			raise ICCProfileInvalidError("Tag table is truncated")
		tags = {}
		for index in range(tagCount):
			tag = tagTable[index * 12:index * 12 + 12]
			tagSignature = tag[:4]
			tagDataOffset = uInt32Number(tag[4:8])
			tagDataSize = uInt32Number(tag[8:12])
			if tagDataOffset + tagDataSize > len(data) or tagDataSize < 8:
				raise ICCProfileInvalidError("Tag data for tag %r is "
											 "truncated (offset %i, size %i)" %
											 (tagSignature, tagDataOffset,
											  tagDataSize))
			if tagSignature in tags:
				logger.warning("Error (non-critical): Tag %r already "
							   "encountered. Skipping...", tagSignature)
				continue
			if not tagSignature in tagSignature2Types:
				continue
			tagData = data[tagDataOffset:tagDataOffset + tagDataSize]
			typeSignature = tagData[:4]
			if not typeSignature in tagSignature2Types[tagSignature]:
				raise ICCProfileInvalidError("Tag %r has unsupported type %r" %
											 (tagSignature, typeSignature))
			tags[tagSignature] = typeSignature2Type[typeSignature](tagData,
																   tagSignature)
		return tags

	@classmethod
	def from_file(cls, path):
		""" Read and parse a profile from a filesystem path """
		try:
			with open(path, "rb") as profile:
				data = profile.read()
		except OSError as exception:
			raise ICCProfileInvalidError("Could not read profile %r: %s" %
										 (path, exception))
		profile = cls(data)
		profile.fileName = path
		return profile

	fileName = None

	def black_luminance(self):
		""" Return the luminance Y of RGB 0, 0, 0 """
		return (self.matrix * [trc.sample_at(0.0) for trc in self.trcs])[1]
