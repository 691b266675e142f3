"""YAML configuration.

A configuration file only needs the keys it changes; everything else comes
from :data:`DEFAULT_CONFIG`::

	backends:
	  compiler: "gakuon:Compiler"
	  assembler: "asm6502:Assembler"
	  engine: "jssid:Player"
	player:
	  load_address: 0
	export:
	  directory: "out"
	panels:
	  shown: ["oscilloscope"]
"""

import copy
import logging
import os
import typing

import yaml


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "sidshell.yaml"

DEFAULT_CONFIG: typing.Dict[str, typing.Any] = {
	"backends": {
		"compiler": None,
		"assembler": None,
		"engine": None,
	},
	"player": {
		"load_address": 0,
		"buffer_size": 16384,
		"background_noise": 0.0005,
	},
	"export": {
		"directory": ".",
	},
	"osc": {
		"receive_port": 9000,
		"send_port": 9001,
		"send_host": "127.0.0.1",
	},
	"panels": {
		"shown": [],
	},
}


def _merge (base: typing.Dict[str, typing.Any], override: typing.Dict[str, typing.Any], path: str = "") -> typing.Dict[str, typing.Any]:

	"""Return ``base`` updated with ``override``, recursing into nested sections."""

	merged = copy.deepcopy(base)

	for key, value in override.items():

		if key not in base:
			raise ValueError(f"Unknown config key {path + key!r}")

		if isinstance(base[key], dict):
			if not isinstance(value, dict):
				raise ValueError(f"Config key {path + key!r} must be a mapping")
			merged[key] = _merge(base[key], value, f"{path}{key}.")
		else:
			merged[key] = value

	return merged


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file merged over the defaults.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return copy.deepcopy(DEFAULT_CONFIG)

	with open(config_path, 'r') as f:
		loaded = yaml.safe_load(f)

	if loaded is None:
		loaded = {}

	if not isinstance(loaded, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping")

	return _merge(DEFAULT_CONFIG, loaded)
