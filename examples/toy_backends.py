"""Toy backends for trying sidshell without a real compiler or SID engine.

The compiler accepts note letters (``c d e f g a b``) and ``r`` for a rest,
one per character, and emits one ``.byte`` line per note.  The assembler
turns those lines back into bytes.  The engine only logs what it is asked
to do.

Run from this directory::

	python -m sidshell --config toy.yaml build song.mml --target asm
"""

import logging
import typing

import sidshell.pipeline


logger = logging.getLogger(__name__)

NOTE_VALUES = {"c": 0x11, "d": 0x13, "e": 0x15, "f": 0x16, "g": 0x19, "a": 0x1C, "b": 0x1F, "r": 0x00}

# JMP $1003: the player entry point of a player program.
PLAYER_HEADER = (0x4C, 0x03, 0x10)


class Compiler:

	"""Compiles a string of note letters to ``.byte`` assembly."""

	def compile (self, source: str, config: sidshell.pipeline.CompilerConfig) -> str:

		lines = ["; toy compiler output"]

		if config.player:
			lines.append(".byte " + ", ".join(str(b) for b in PLAYER_HEADER))

		for column, char in enumerate(source.lower(), start=1):

			if char.isspace():
				continue

			if char not in NOTE_VALUES:
				raise ValueError(f"column {column}: unknown note {char!r}")

			lines.append(f".byte {NOTE_VALUES[char]}")

		return "\n".join(lines) + "\n"


class Assembler:

	"""Assembles ``.byte`` directives; anything else is an error."""

	def assemble (self, assembly: str) -> typing.Dict[str, typing.List[int]]:

		code: typing.List[int] = []

		for number, line in enumerate(assembly.splitlines(), start=1):

			line = line.split(";", 1)[0].strip()

			if not line:
				continue

			if not line.startswith(".byte "):
				raise SyntaxError(f"line {number}: unsupported statement {line!r}")

			code.extend(int(value) for value in line[len(".byte "):].split(","))

		return {"object_code": code}


class Engine:

	"""Stands in for a SID emulator by logging each request."""

	def __init__ (self, buffer_size: int, background_noise: float) -> None:

		logger.info(f"Toy engine: buffer {buffer_size}, noise {background_noise}")

	def load_init_data (self, data: bytes, address: int) -> None:

		logger.info(f"Toy engine: loaded {len(data)} bytes at ${address:04X}")

	def play_continuous (self) -> None:

		logger.info("Toy engine: playing")

	def stop (self) -> None:

		logger.info("Toy engine: stopped")
