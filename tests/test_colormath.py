# -*- coding: utf-8 -*-

import pytest

from GamutClamp import colormath
from GamutClamp.colormath import (Matrix, MatrixShapeError,
								  SingularMatrixError, Vector)


def assert_matrix_close(matrix1, matrix2, tolerance=1e-9):
	assert matrix1.shape == matrix2.shape
	for row1, row2 in zip(matrix1, matrix2):
		for a, b in zip(row1, row2):
			assert a == pytest.approx(b, abs=tolerance)


def test_matrix_multiply():
	m1 = Matrix([[1, 2], [3, 4]])
	m2 = Matrix([[5, 6], [7, 8]])
	assert m1 * m2 == [[19, 22], [43, 50]]
	assert isinstance(m1 * m2, Matrix)


def test_matrix_multiply_non_square():
	m1 = Matrix([[1, 2, 3]])
	m2 = Matrix.column([4, 5, 6])
	assert m1 * m2 == [[32]]
	assert (m2 * m1).shape == (3, 3)


def test_matrix_vector_multiply():
	result = Matrix.identity(3) * (0.25, 0.5, 1.0)
	assert isinstance(result, Vector)
	assert result == [0.25, 0.5, 1.0]


def test_matrix_shape_mismatch():
	with pytest.raises(MatrixShapeError):
		Matrix([[1, 2], [3, 4]]) * Matrix([[1, 2, 3]])
	with pytest.raises(MatrixShapeError):
		Matrix([[1, 2], [3, 4]]) + Matrix([[1, 2]])
	with pytest.raises(MatrixShapeError):
		Matrix.identity(3) * [1, 2]
	with pytest.raises(MatrixShapeError):
		Matrix([[1, 2], [3]])


def test_matrix_scalar_ops():
	m = Matrix([[1.0, 2.0], [3.0, 4.0]])
	assert m * 2 == [[2.0, 4.0], [6.0, 8.0]]
	assert 2 * m == [[2.0, 4.0], [6.0, 8.0]]
	assert m / 2 == [[0.5, 1.0], [1.5, 2.0]]
	assert m - m == [[0, 0], [0, 0]]


def test_matrix_inverse():
	m = Matrix([[0.4124, 0.3576, 0.1805],
				[0.2126, 0.7152, 0.0722],
				[0.0193, 0.1192, 0.9505]])
	assert_matrix_close(m * m.inverted(), Matrix.identity(3))
	assert_matrix_close(m.inverted() * m, Matrix.identity(3))


def test_matrix_inverse_2x2():
	m = Matrix([[4.0, 7.0], [2.0, 6.0]])
	assert_matrix_close(m * m.inverted(), Matrix.identity(2))


def test_matrix_inverse_small_entries():
	# Determinant 1e-15, but perfectly conditioned
	m = Matrix.identity(3) * 1e-5
	assert_matrix_close(m.inverted() / 1e5, Matrix.identity(3))
	m = Matrix([[2e-7, 1e-7], [1e-7, 3e-7]])
	assert_matrix_close(m * m.inverted(), Matrix.identity(2))


def test_singular_matrix():
	with pytest.raises(SingularMatrixError):
		Matrix([[1, 2, 3], [2, 4, 6], [1, 1, 1]]).inverted()
	with pytest.raises(SingularMatrixError):
		Matrix([[0, 0, 0], [0, 1, 0], [0, 0, 1]]).inverted()
	with pytest.raises(SingularMatrixError):
		(Matrix([[1, 2, 3], [2, 4, 6], [1, 1, 1]]) * 1e-6).inverted()
	# Also a shape error for callers catching the broader class
	assert issubclass(SingularMatrixError, MatrixShapeError)


def test_map():
	m = Matrix([[1.0, -2.0], [3.0, -4.0]])
	mapped = m.map(abs)
	assert mapped == [[1.0, 2.0], [3.0, 4.0]]
	assert isinstance(mapped, Matrix)
	assert m[0][1] == -2.0
	v = Vector([0.12345, 0.5])
	assert v.map(lambda x: x * 2) == [0.2469, 1.0]
	assert v.rounded(2) == [0.12, 0.5]


def test_transposed():
	assert Matrix([[1, 2, 3]]).transposed() == [[1], [2], [3]]


def test_vector_ops():
	v = Vector([1.0, 2.0, 3.0])
	assert v + [1, 1, 1] == [2.0, 3.0, 4.0]
	assert v - v == [0, 0, 0]
	assert v * 2 == [2.0, 4.0, 6.0]
	assert 2 * v == [2.0, 4.0, 6.0]
	assert -v == [-1.0, -2.0, -3.0]
	v[1] = 5.0
	assert v[1] == 5.0
	with pytest.raises(MatrixShapeError):
		v + [1, 2]


def test_specialpow_srgb_roundtrip():
	for v in (0.0, 0.01, 0.04045, 0.2, 0.5, 1.0):
		encoded = colormath.specialpow(colormath.specialpow(v, -2.4),
									   1.0 / -2.4)
		assert encoded == pytest.approx(v, abs=1e-12)


def test_specialpow_lstar():
	# L* 50 is Y 18.42%
	assert colormath.specialpow(0.5, -3.0) == pytest.approx(0.184186, abs=1e-6)
	# Linear segment below L* 8
	assert colormath.specialpow(0.05, -3.0) == pytest.approx(
		5.0 / colormath.LSTAR_K)
	with pytest.raises(ValueError):
		colormath.specialpow(0.5, -1.0)


def test_xyY2XYZ():
	assert colormath.xyY2XYZ(0.3127, 0.3290) == pytest.approx(
		(0.95046, 1.0, 1.08906), abs=1e-5)
	assert colormath.xyY2XYZ(0.3, 0.0) == (0, 0, 0)
	x, y, Y = colormath.XYZ2xyY(*colormath.xyY2XYZ(0.64, 0.33, 0.5))
	assert (x, y, Y) == pytest.approx((0.64, 0.33, 0.5))


def test_wp_adaption_identity():
	m = colormath.wp_adaption_matrix("D50", "D50")
	assert_matrix_close(m, Matrix.identity(3))


def test_wp_adaption_maps_white():
	X, Y, Z = (colormath.wp_adaption_matrix("D65", "D50") *
			   colormath.get_whitepoint("D65"))
	assert (X, Y, Z) == pytest.approx(colormath.get_whitepoint("D50"))


def test_xicc_tech_gamma():
	# No black offset, nothing to solve
	assert colormath.xicc_tech_gamma(2.2, 0.0) == 2.2
	gamma = colormath.xicc_tech_gamma(2.2, 0.1, 1.0)
	# Output offset black + (1 - black) * 0.5 ** gamma hits 0.5 ** 2.2
	assert 0.1 + 0.9 * 0.5 ** gamma == pytest.approx(0.5 ** 2.2, abs=1e-8)
