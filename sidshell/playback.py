"""Feeds compiled SID programs into an audio engine.

Only one program plays at a time: :meth:`PlaybackController.play` stops the
current run before loading the next one, and :meth:`PlaybackController.stop`
is a no-op when nothing is playing.
"""

import logging
import typing

import sidshell.errors


logger = logging.getLogger(__name__)

LOAD_ADDRESS = 0


@typing.runtime_checkable
class AudioEngine (typing.Protocol):

	"""
	Protocol for the sound-chip emulator that renders audio.
	"""

	def load_init_data (self, data: bytes, address: int) -> None:

		"""
		Load a program image at ``address`` and run its init routine.
		"""

		...

	def play_continuous (self) -> None:

		"""
		Start playing until stopped.
		"""

		...

	def stop (self) -> None:

		"""
		Stop playing.
		"""

		...


class PlaybackController:

	"""Starts and stops one program at a time on an audio engine."""

	def __init__ (self, engine: typing.Optional[AudioEngine], load_address: int = LOAD_ADDRESS) -> None:

		"""Store the engine; ``None`` means playback is unavailable."""

		self._engine = engine
		self.load_address = load_address
		self._playing = False
		self._loaded_size = 0

	@property
	def is_playing (self) -> bool:

		return self._playing

	@property
	def loaded_size (self) -> int:

		"""Size in bytes of the last program handed to the engine."""

		return self._loaded_size

	def play (self, data: bytes) -> None:

		"""Load ``data`` and start continuous playback, replacing anything already playing."""

		if self._engine is None:
			raise sidshell.errors.PlaybackError("No audio engine is configured")

		if self._playing:
			self.stop()

		try:
			self._engine.load_init_data(bytes(data), self.load_address)
			self._loaded_size = len(data)
			self._engine.play_continuous()
		except Exception as exc:
			raise sidshell.errors.PlaybackError(f"Audio engine failed: {sidshell.errors.diagnostic_of(exc)}") from exc

		self._playing = True
		logger.info(f"Playing {len(data)} bytes from ${self.load_address:04X}")

	def stop (self) -> None:

		"""Halt playback if anything is playing."""

		if not self._playing or self._engine is None:
			return

		# Cleared first so a failing stop is not retried against the same run.
		self._playing = False

		try:
			self._engine.stop()
		except Exception as exc:
			raise sidshell.errors.PlaybackError(f"Audio engine failed to stop: {sidshell.errors.diagnostic_of(exc)}") from exc

		logger.info("Playback stopped")
