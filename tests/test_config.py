# -*- coding: utf-8 -*-

import configparser

import pytest

from GamutClamp import config


@pytest.fixture
def cfg():
	cfg = configparser.RawConfigParser()
	cfg.optionxform = str
	return cfg


def test_defaults(cfg):
	assert config.getcfg("target", cfg=cfg) == 0
	assert config.getcfg("calibration.trc", cfg=cfg) == "srgb"
	assert config.getcfg("calibration.gamma", cfg=cfg) == 2.2
	assert config.getcfg("lut.size", cfg=cfg) == 1024
	assert config.getcfg("target", fallback=False, cfg=cfg) is None
	assert config.getcfg("unknown.option", cfg=cfg) is None


def test_set_and_get(cfg):
	config.setcfg("target", 2, cfg=cfg)
	config.setcfg("calibration.trc", "lstar", cfg=cfg)
	config.setcfg("profile.use_icc", True, cfg=cfg)
	assert config.getcfg("target", cfg=cfg) == 2
	assert config.getcfg("calibration.trc", cfg=cfg) == "lstar"
	assert config.getcfg("profile.use_icc", cfg=cfg) == 1
	assert config.getcfg("target", raw=True, cfg=cfg) == "2"
	config.setcfg("target", None, cfg=cfg)
	assert not config.hascfg("target", fallback=False, cfg=cfg)
	assert config.hascfg("target", cfg=cfg)


def test_invalid_values_fall_back(cfg):
	config.setcfg("calibration.gamma", "steep", cfg=cfg)
	config.setcfg("calibration.trc", "hlg", cfg=cfg)
	config.setcfg("profile.use_icc", 5, cfg=cfg)
	assert config.getcfg("calibration.gamma", cfg=cfg) == 2.2
	assert config.getcfg("calibration.trc", cfg=cfg) == "srgb"
	assert config.getcfg("profile.use_icc", cfg=cfg) == 0


def test_ranges_clamp(cfg):
	config.setcfg("target.scale.red", 150, cfg=cfg)
	config.setcfg("calibration.outoffset", -5, cfg=cfg)
	config.setcfg("lut.size", 1, cfg=cfg)
	assert config.getcfg("target.scale.red", cfg=cfg) == 100.0
	assert config.getcfg("calibration.outoffset", cfg=cfg) == 0.0
	assert config.getcfg("lut.size", cfg=cfg) == 2


def test_write_and_init(tmp_path, cfg):
	path = str(tmp_path / "GamutClamp.ini")
	config.setcfg("target", 3, cfg=cfg)
	config.setcfg("calibration.trc", "bt1886", cfg=cfg)
	config.setcfg("no.such.option", "x", cfg=cfg)
	assert config.writecfg(path, cfg=cfg)
	with open(path, encoding="UTF-8") as cfgfile:
		lines = cfgfile.read().splitlines()
	assert lines == ["[DEFAULT]", "calibration.trc = bt1886", "target = 3"]

	loaded = configparser.RawConfigParser()
	loaded.optionxform = str
	assert config.initcfg(path, cfg=loaded)
	assert config.getcfg("target", cfg=loaded) == 3
	assert config.getcfg("calibration.trc", cfg=loaded) == "bt1886"
	# Unchanged file is not read again
	assert not config.initcfg(path, cfg=loaded)
	assert config.initcfg(path, cfg=loaded, force_load=True)


def test_write_selected_options(tmp_path, cfg):
	path = str(tmp_path / "GamutClamp.ini")
	config.setcfg("target", 1, cfg=cfg)
	config.setcfg("calibration.gamma", 2.4, cfg=cfg)
	assert config.writecfg(path, options=("calibration.", ), cfg=cfg)
	with open(path, encoding="UTF-8") as cfgfile:
		assert cfgfile.read() == "[DEFAULT]\ncalibration.gamma = 2.4\n"


def test_init_missing_file(tmp_path, cfg):
	assert not config.initcfg(str(tmp_path / "missing.ini"), cfg=cfg)
