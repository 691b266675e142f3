"""Build pipeline: compile, optionally assemble, then package for a target.

The pipeline has two stages, each timed by :class:`sidshell.bench.Bench`:

1. **compile** - source text to 6502 assembly text.  Only
   ``EXPORT_PLAYER_PROGRAM`` compiles in player configuration.
2. **assemble** - assembly text to object code.  Skipped for
   ``EXPORT_ASSEMBLY``, whose artifact is the compiler output itself.

A failing stage ends the build with :class:`~sidshell.errors.CompileError` or
:class:`~sidshell.errors.AssembleError`; nothing is retried and no partial
artifact is returned.  Nothing is cached either: two builds of the same
source produce equal artifacts because each one starts from scratch.

Builds are single-flight.  Asking for a build while one is running (for
example from an event listener fired mid-build) raises
:class:`~sidshell.errors.BuildInProgress` and leaves the running build alone.
"""

import dataclasses
import enum
import logging
import typing

import sidshell.bench
import sidshell.errors


logger = logging.getLogger(__name__)

MIME_BINARY = "application/octet-binary"
MIME_TEXT = "text/plain;charset=utf-8"

DEFAULT_BASENAME = "Untitled"


@dataclasses.dataclass(frozen=True)
class CompilerConfig:

	"""Options passed to the compiler for one build."""

	player: bool = False


@typing.runtime_checkable
class Compiler (typing.Protocol):

	"""
	Protocol for the source-to-assembly compiler.
	"""

	def compile (self, source: str, config: CompilerConfig) -> str:

		"""
		Return assembly text, raising on invalid source.
		"""

		...


@typing.runtime_checkable
class Assembler (typing.Protocol):

	"""
	Protocol for the assembler.

	The result carries the object code either as an ``object_code``
	attribute or under an ``object_code`` / ``objectCode`` key.
	"""

	def assemble (self, assembly: str) -> typing.Any:

		"""
		Assemble the text, raising on invalid assembly.
		"""

		...


class BuildTarget (enum.Enum):

	"""The four things a document can be built into."""

	PLAY = ("play", False, True, ".sid", MIME_BINARY)
	EXPORT_ASSEMBLY = ("asm", False, False, ".asm", MIME_TEXT)
	EXPORT_SOUND_FILE = ("sid", False, True, ".sid", MIME_BINARY)
	EXPORT_PLAYER_PROGRAM = ("prg", True, True, ".prg", MIME_BINARY)

	def __init__ (self, key: str, player: bool, assembles: bool, extension: str, mime_type: str) -> None:

		self.key = key
		self.player = player
		self.assembles = assembles
		self.extension = extension
		self.mime_type = mime_type

	@classmethod
	def from_key (cls, key: str) -> "BuildTarget":

		"""Look a target up by its short key (``play``, ``asm``, ``sid`` or ``prg``)."""

		for target in cls:
			if target.key == key:
				return target

		raise ValueError(f"Unknown build target {key!r}. Available: {[t.key for t in cls]}")


@dataclasses.dataclass(frozen=True)
class PipelineArtifact:

	"""
	The product of one build.

	Attributes:
		target: The target that was built.
		data: Assembly text for ``EXPORT_ASSEMBLY``, object code otherwise.
		filename: Suggested output name, e.g. ``Untitled.sid``.
	"""

	target: BuildTarget
	data: typing.Union[bytes, str]
	filename: str

	@property
	def mime_type (self) -> str:

		return self.target.mime_type

	@property
	def is_binary (self) -> bool:

		return isinstance(self.data, bytes)


def _object_code (result: typing.Any) -> bytes:

	"""Pull the object code out of an assembler result and convert it to bytes."""

	if isinstance(result, typing.Mapping):
		code = result.get("object_code", result.get("objectCode"))
	else:
		code = getattr(result, "object_code", None)

	if code is None:
		raise ValueError("Assembler result has no object code")

	return bytes(code)


class PipelineOrchestrator:

	"""Runs build targets against a compiler and an assembler."""

	def __init__ (
		self,
		compiler: Compiler,
		assembler: Assembler,
		bench: typing.Optional[sidshell.bench.Bench] = None,
		basename: str = DEFAULT_BASENAME
	) -> None:

		"""Store the backends and the bench used to time each stage."""

		self._compiler = compiler
		self._assembler = assembler
		self.bench = bench if bench is not None else sidshell.bench.Bench()
		self.basename = basename
		self._running: typing.Optional[BuildTarget] = None

	@property
	def running (self) -> typing.Optional[BuildTarget]:

		"""The target currently being built, if any."""

		return self._running

	def build (self, target: BuildTarget, source: str) -> PipelineArtifact:

		"""Run every stage ``target`` needs on ``source`` and package the result."""

		if self._running is not None:
			raise sidshell.errors.BuildInProgress(self._running.key, target.key)

		self._running = target

		try:
			assembly = self.bench.measure("compile", self._compile, target, source)

			if not target.assembles:
				data: typing.Union[bytes, str] = assembly
			else:
				data = self.bench.measure("assemble", self._assemble, target, assembly)

		finally:
			self._running = None

		artifact = PipelineArtifact(
			target = target,
			data = data,
			filename = f"{self.basename}{target.extension}"
		)

		logger.debug(f"Built {artifact.filename} ({len(data)} {'bytes' if artifact.is_binary else 'chars'})")

		return artifact

	def _compile (self, target: BuildTarget, source: str) -> str:

		try:
			assembly = self._compiler.compile(source, CompilerConfig(player=target.player))
		except Exception as exc:
			raise sidshell.errors.CompileError(sidshell.errors.diagnostic_of(exc), target.key) from exc

		if not isinstance(assembly, str):
			raise sidshell.errors.CompileError(f"compiler returned {type(assembly).__name__}, expected text", target.key)

		return assembly

	def _assemble (self, target: BuildTarget, assembly: str) -> bytes:

		try:
			return _object_code(self._assembler.assemble(assembly))
		except Exception as exc:
			raise sidshell.errors.AssembleError(sidshell.errors.diagnostic_of(exc), target.key) from exc
