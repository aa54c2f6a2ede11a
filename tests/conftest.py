# -*- coding: utf-8 -*-

import struct

import numpy
import pytest

from GamutClamp import colorimetry
from GamutClamp.lut import INPUT_ENTRIES, Lut16
from GamutClamp.tonecurve import TableToneCurve

SRGB_PARAMS = (2.4, 1 / 1.055, 0.055 / 1.055, 1 / 12.92, 0.04045)


def s15(v):
	return struct.pack(">i", int(round(v * 65536)))


def xyz_tag(X, Y, Z):
	return b"XYZ \0\0\0\0" + s15(X) + s15(Y) + s15(Z)


def curv_tag(gamma=None, entries=None):
	if entries is not None:
		return (b"curv\0\0\0\0" + struct.pack(">I", len(entries)) +
				struct.pack(">%iH" % len(entries), *entries))
	if gamma is None:
		return b"curv\0\0\0\0" + struct.pack(">I", 0)
	return (b"curv\0\0\0\0" + struct.pack(">I", 1) +
			struct.pack(">H", int(round(gamma * 256))))


def para_tag(fntype, params):
	return (b"para\0\0\0\0" + struct.pack(">H", fntype) + b"\0\0" +
			b"".join(s15(v) for v in params))


def desc_tag(text):
	encoded = text.encode("ASCII") + b"\0"
	return b"desc\0\0\0\0" + struct.pack(">I", len(encoded)) + encoded


def mluc_tag(text):
	utf16 = text.encode("UTF-16-BE")
	return (b"mluc\0\0\0\0" + struct.pack(">II", 1, 12) + b"enUS" +
			struct.pack(">II", len(utf16), 28) + utf16)


def mft2_tag(input_tables, clut, output_tables, grid):
	n = len(input_tables[0])
	m = len(output_tables[0])
	data = b"mft2\0\0\0\0" + bytes((3, 3, grid, 0))
	# Identity matrix
	for v in (1, 0, 0, 0, 1, 0, 0, 0, 1):
		data += s15(v)
	data += struct.pack(">HH", n, m)
	for table in input_tables:
		data += struct.pack(">%iH" % n, *table)
	data += struct.pack(">%iH" % len(clut), *clut)
	for table in output_tables:
		data += struct.pack(">%iH" % m, *table)
	return data


def build_profile(tags, profile_class=b"mntr", color_space=b"RGB ",
				  pcs=b"XYZ ", illuminant=(0.9642, 1.0, 0.8249)):
	"""
	Assemble a binary ICC profile.

	'tags' is a list of (signature, tag data) pairs. Tag data is stored
	4-byte aligned after the tag table in the given order.

	"""
	table = b""
	body = b""
	offset = 132 + len(tags) * 12
	for signature, data in tags:
		table += signature + struct.pack(">II", offset + len(body), len(data))
		body += data
		body += b"\0" * (-len(body) % 4)
	size = offset + len(body)
	header = (struct.pack(">I", size) + b"none" + bytes((2, 0x10, 0, 0)) +
			  profile_class + color_space + pcs + b"\0" * 12 + b"acsp" +
			  b"\0" * 28 + b"".join(s15(v) for v in illuminant))
	header += b"\0" * (128 - len(header))
	return header + struct.pack(">I", len(tags)) + table + body


def matrix_tags(space=colorimetry.COLOR_SPACES[0][1]):
	matrix = colorimetry.rgb_to_pcs_xyz(space)
	return [(signature, xyz_tag(*[row[i] for row in matrix]))
			for i, signature in enumerate((b"rXYZ", b"gXYZ", b"bXYZ"))]


@pytest.fixture
def srgb_profile_data():
	trc = para_tag(3, SRGB_PARAMS)
	return build_profile(matrix_tags() +
						 [(b"rTRC", trc), (b"gTRC", trc), (b"bTRC", trc),
						  (b"wtpt", xyz_tag(0.9642, 1.0, 0.8249)),
						  (b"desc", desc_tag("sRGB test"))])


@pytest.fixture
def gamma_profile_data():
	trc = curv_tag(2.2)
	return build_profile(matrix_tags() +
						 [(b"rTRC", trc), (b"gTRC", trc), (b"bTRC", trc)])


def identity_lattice(size):
	""" Lattice mapping grid point n to n / (size - 1) in 1.0 = 32768 """
	axis = numpy.round(numpy.linspace(0, 32768, size))
	r, g, b = numpy.meshgrid(axis, axis, axis, indexing="ij")
	return numpy.stack((r, g, b), axis=-1)


def identity_input_curves():
	ramp = numpy.arange(INPUT_ENTRIES)
	return numpy.stack((ramp, ramp, ramp))


def identity_output_curves():
	return [TableToneCurve([0, 65535]) for i in range(3)]


@pytest.fixture
def identity_lut():
	return Lut16(identity_input_curves(), identity_lattice(17),
				 identity_output_curves())
