import typing

import pytest

import sidshell.app
import sidshell.pipeline


class CallLog:

	"""Ordered record of every backend call made during a test."""

	def __init__ (self) -> None:

		self.calls: typing.List[typing.Tuple[str, ...]] = []

	def record (self, *call: typing.Any) -> None:

		self.calls.append(call)

	def names (self) -> typing.List[str]:

		"""Return just the call names, in order."""

		return [call[0] for call in self.calls]

	def count (self, name: str) -> int:

		return self.names().count(name)


class FakeCompiler:

	"""Compiler stub that emits one ``.byte`` line per source character.

	Source containing ``error`` is rejected; source containing ``bad-asm``
	compiles to assembly the fake assembler rejects.
	"""

	def __init__ (self, log: CallLog) -> None:

		self._log = log

	def compile (self, source: str, config: sidshell.pipeline.CompilerConfig) -> str:

		self._log.record("compile", source, config.player)

		if "error" in source:
			raise ValueError("line 1: unexpected token")

		header = "; player\n" if config.player else "; sid\n"
		body = "".join(f".byte {ord(c) & 0xFF}\n" for c in source)

		if "bad-asm" in source:
			body += "lda #$zz\n"

		return header + body


class FakeAssembler:

	"""Assembler stub that collects the ``.byte`` values of its input."""

	def __init__ (self, log: CallLog) -> None:

		self._log = log

	def assemble (self, assembly: str) -> typing.Dict[str, typing.List[int]]:

		self._log.record("assemble", assembly)

		code: typing.List[int] = [0x4C] if assembly.startswith("; player") else []

		for line in assembly.splitlines():
			if line.startswith(";"):
				continue
			if not line.startswith(".byte "):
				raise SyntaxError(f"cannot assemble {line!r}")
			code.append(int(line[len(".byte "):]))

		return {"objectCode": code}


class FakeEngine:

	"""Audio engine stub recording load/play/stop calls."""

	def __init__ (self, log: CallLog) -> None:

		self._log = log
		self.loaded: typing.Optional[bytes] = None
		self.address: typing.Optional[int] = None
		self.playing = False

	def load_init_data (self, data: bytes, address: int) -> None:

		self._log.record("load_init_data", data, address)
		self.loaded = data
		self.address = address

	def play_continuous (self) -> None:

		self._log.record("play_continuous")
		self.playing = True

	def stop (self) -> None:

		self._log.record("stop")
		self.playing = False


class FakeEmitter:

	"""File emitter stub keeping every saved file in memory."""

	def __init__ (self) -> None:

		self.saved: typing.List[typing.Tuple[typing.Union[bytes, str], str, str]] = []

	def save (self, data: typing.Union[bytes, str], suggested_name: str, mime_type: str) -> None:

		self.saved.append((data, suggested_name, mime_type))


class FakeLayout:

	"""Panel layout stub that fails loudly on a duplicate insert or a missing remove."""

	def __init__ (self) -> None:

		self.attached: typing.List[str] = []
		self.inserts = 0
		self.removes = 0
		self.closes = 0

	def insert (self, spec: typing.Any) -> None:

		assert spec.name not in self.attached, f"{spec.name} inserted twice"
		self.attached.append(spec.name)
		self.inserts += 1

	def remove (self, name: str) -> None:

		self.attached.remove(name)
		self.removes += 1

	def closed (self, name: str) -> None:

		if name in self.attached:
			self.attached.remove(name)
		self.closes += 1


@pytest.fixture
def call_log () -> CallLog:

	return CallLog()


@pytest.fixture
def compiler (call_log: CallLog) -> FakeCompiler:

	return FakeCompiler(call_log)


@pytest.fixture
def assembler (call_log: CallLog) -> FakeAssembler:

	return FakeAssembler(call_log)


@pytest.fixture
def engine (call_log: CallLog) -> FakeEngine:

	return FakeEngine(call_log)


@pytest.fixture
def emitter () -> FakeEmitter:

	return FakeEmitter()


@pytest.fixture
def layout () -> FakeLayout:

	return FakeLayout()


@pytest.fixture
def app (
	compiler: FakeCompiler,
	assembler: FakeAssembler,
	engine: FakeEngine,
	emitter: FakeEmitter,
	layout: FakeLayout
) -> sidshell.app.AppController:

	"""A controller wired to the fakes, with no documents open."""

	return sidshell.app.AppController(
		compiler = compiler,
		assembler = assembler,
		engine = engine,
		emitter = emitter,
		layout = layout
	)
