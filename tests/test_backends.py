import copy
import os.path
import sys
import types
import typing

import pytest

import sidshell.backends
import sidshell.config


class Engine:

	def __init__ (self, buffer_size: int, background_noise: float) -> None:

		self.buffer_size = buffer_size
		self.background_noise = background_noise


@pytest.fixture
def backend_module (monkeypatch: pytest.MonkeyPatch) -> types.ModuleType:

	"""Register an importable module holding backend factories."""

	module = types.ModuleType("fake_sid_backends")
	module.Compiler = lambda: "compiler"  # type: ignore[attr-defined]
	module.Assembler = lambda: "assembler"  # type: ignore[attr-defined]
	module.Engine = Engine  # type: ignore[attr-defined]

	monkeypatch.setitem(sys.modules, "fake_sid_backends", module)

	return module


def _config (**backends: typing.Optional[str]) -> typing.Dict[str, typing.Any]:

	config = copy.deepcopy(sidshell.config.DEFAULT_CONFIG)
	config["backends"].update(backends)
	return config


def test_load_object () -> None:

	assert sidshell.backends.load_object("os.path:join") is os.path.join


def test_load_nested_attribute () -> None:

	assert sidshell.backends.load_object("os:path.join") is os.path.join


@pytest.mark.parametrize("reference", ["os.path", ":join", "os.path:", ""])
def test_malformed_reference (reference: str) -> None:

	with pytest.raises(ValueError, match="package.module:attribute"):
		sidshell.backends.load_object(reference)


def test_missing_module () -> None:

	with pytest.raises(ValueError, match="Cannot import"):
		sidshell.backends.load_object("no_such_sid_module:Compiler")


def test_missing_attribute () -> None:

	with pytest.raises(ValueError, match="no attribute"):
		sidshell.backends.load_object("os.path:no_such_function")


def test_create_backends (backend_module: types.ModuleType) -> None:

	"""The engine factory receives the player buffer size and noise level."""

	backends = sidshell.backends.create_backends(_config(
		compiler = "fake_sid_backends:Compiler",
		assembler = "fake_sid_backends:Assembler",
		engine = "fake_sid_backends:Engine",
	))

	assert backends.compiler == "compiler"
	assert backends.assembler == "assembler"
	assert isinstance(backends.engine, Engine)
	assert backends.engine.buffer_size == 16384
	assert backends.engine.background_noise == pytest.approx(0.0005)


def test_engine_is_optional (backend_module: types.ModuleType, caplog: pytest.LogCaptureFixture) -> None:

	backends = sidshell.backends.create_backends(_config(
		compiler = "fake_sid_backends:Compiler",
		assembler = "fake_sid_backends:Assembler",
	))

	assert backends.engine is None
	assert "playback is disabled" in caplog.text


def test_compiler_is_required () -> None:

	with pytest.raises(ValueError, match="backends.compiler"):
		sidshell.backends.create_backends(_config(assembler="fake_sid_backends:Assembler"))
