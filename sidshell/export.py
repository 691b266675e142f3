"""Writing build artifacts somewhere the user can pick them up."""

import logging
import pathlib
import typing


logger = logging.getLogger(__name__)


@typing.runtime_checkable
class FileEmitter (typing.Protocol):

	"""
	Protocol for whatever delivers an exported file to the user.
	"""

	def save (self, data: typing.Union[bytes, str], suggested_name: str, mime_type: str) -> None:

		"""
		Deliver ``data`` under ``suggested_name``.  Nothing is returned.
		"""

		...


class DirectoryEmitter:

	"""Writes exported files into a directory, replacing files of the same name."""

	def __init__ (self, directory: typing.Union[str, pathlib.Path] = ".") -> None:

		self.directory = pathlib.Path(directory)

	def save (self, data: typing.Union[bytes, str], suggested_name: str, mime_type: str) -> None:

		"""Write ``data`` to ``directory / suggested_name``; text is written as UTF-8."""

		# Only the final path component is honoured.
		path = self.directory / pathlib.PurePath(suggested_name).name
		self.directory.mkdir(parents=True, exist_ok=True)

		if isinstance(data, str):
			path.write_text(data, encoding="utf-8")
		else:
			path.write_bytes(bytes(data))

		logger.info(f"Saved {path} ({mime_type})")
