"""Loading the compiler, assembler and audio engine named in the configuration.

Backends are referenced as ``"package.module:attribute"``.  The attribute is
called with no arguments (compiler, assembler) or with the player settings
(engine) to produce the instance the controller uses.
"""

import dataclasses
import importlib
import logging
import typing


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Backends:

	"""The three external services the controller drives."""

	compiler: typing.Any
	assembler: typing.Any
	engine: typing.Optional[typing.Any] = None


def load_object (reference: str) -> typing.Any:

	"""Import ``"module:attribute"`` and return the attribute."""

	module_path, sep, attribute = reference.partition(":")

	if not sep or not module_path or not attribute:
		raise ValueError(f"Backend reference {reference!r} must look like 'package.module:attribute'")

	try:
		module = importlib.import_module(module_path)
	except ImportError as exc:
		raise ValueError(f"Cannot import backend module {module_path!r}: {exc}") from exc

	target: typing.Any = module

	for part in attribute.split("."):
		try:
			target = getattr(target, part)
		except AttributeError:
			raise ValueError(f"Module {module_path!r} has no attribute {attribute!r}") from None

	return target


def create_backends (config: typing.Dict[str, typing.Any]) -> Backends:

	"""Instantiate the backends named in ``config["backends"]``.

	The compiler and assembler are required.  Without an engine the
	controller still builds and exports but cannot play.
	"""

	names = config["backends"]

	for required in ("compiler", "assembler"):
		if not names.get(required):
			raise ValueError(f"No {required} configured - set backends.{required} in the config file")

	compiler = load_object(names["compiler"])()
	assembler = load_object(names["assembler"])()
	engine = None

	if names.get("engine"):
		player = config["player"]
		engine = load_object(names["engine"])(player["buffer_size"], player["background_noise"])
	else:
		logger.warning("No audio engine configured - playback is disabled")

	logger.debug(f"Backends: compiler={names['compiler']} assembler={names['assembler']} engine={names.get('engine')}")

	return Backends(compiler=compiler, assembler=assembler, engine=engine)
