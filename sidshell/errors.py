"""Error taxonomy for the application controller.

Every failure raised by the core derives from :class:`SidShellError` so a
front end can catch the whole family, while the concrete subclasses let it
render a specific message.  None of these is fatal: session and panel state
are left intact and usable after any of them.
"""

import typing


class SidShellError (Exception):

	"""Base class for all controller errors."""


class NoActiveDocument (SidShellError):

	"""An operation that needs an active document was invoked with none open."""

	def __init__ (self, operation: str = "") -> None:

		self.operation = operation

		if operation:
			super().__init__(f"{operation} requires an open document")
		else:
			super().__init__("No active document")


class UnknownDocument (SidShellError, LookupError):

	"""A document identity is not a member of the session."""

	def __init__ (self, document_id: typing.Any) -> None:

		self.document_id = document_id
		super().__init__(f"Unknown document: {document_id!r}")


class UnknownPanel (SidShellError, LookupError):

	"""A panel name is not one of the fixed auxiliary panels."""

	def __init__ (self, name: str, available: typing.Iterable[str] = ()) -> None:

		self.name = name
		self.available = tuple(available)
		super().__init__(f"Unknown panel {name!r}. Available: {list(self.available)}")


class CloseRefused (SidShellError):

	"""A document that is not closable was asked to close."""

	def __init__ (self, document_id: int, title: str) -> None:

		self.document_id = document_id
		self.title = title
		super().__init__(f"Document {title!r} ({document_id}) cannot be closed")


class BuildError (SidShellError):

	"""
	A pipeline stage failed.

	Attributes:
		stage: Name of the failing stage (``"compile"`` or ``"assemble"``).
		target: Name of the build target being produced.
		diagnostic: The backend's own description of the problem.
	"""

	stage = ""

	def __init__ (self, diagnostic: str, target: str = "") -> None:

		self.diagnostic = diagnostic
		self.target = target
		super().__init__(f"{self.stage} failed: {diagnostic}")


class CompileError (BuildError):

	"""The source text was rejected by the compiler."""

	stage = "compile"


class AssembleError (BuildError):

	"""The intermediate assembly was rejected by the assembler."""

	stage = "assemble"


class BuildInProgress (SidShellError):

	"""A build was requested while another one was still running."""

	def __init__ (self, running: str, requested: str) -> None:

		self.running = running
		self.requested = requested
		super().__init__(f"Cannot start {requested} build while {running} build is running")


class PlaybackError (SidShellError):

	"""The audio engine failed to load or start a program."""


def diagnostic_of (exc: BaseException) -> str:

	"""Return the most specific human-readable message a backend exception carries."""

	for attribute in ("diagnostic", "message"):
		value = getattr(exc, attribute, None)
		if isinstance(value, str) and value:
			return value

	text = str(exc)
	return text if text else type(exc).__name__
