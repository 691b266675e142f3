"""Open documents and the active-document pointer.

:class:`DocumentSession` owns every open :class:`Document` in tab order and
tracks which one is active.  Whenever the session is non-empty the active
document is a member of it; closing the active document hands activity to a
neighbour before the closed one is discarded.

Documents are addressed by a small integer id that is never reused within a
session.  Editor widgets look documents up by that id and push their text in
with :meth:`DocumentSession.set_source`; the session holds no references into
the UI toolkit.
"""

import dataclasses
import logging
import typing

import sidshell.errors


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


@dataclasses.dataclass
class Document:

	"""
	A unit of editable source.

	Attributes:
		id: Stable identity within the owning session.
		title: Tab caption.
		source: The current source text.
		closable: ``False`` makes :meth:`DocumentSession.close_active` refuse.
	"""

	id: int
	title: str
	source: str = ""
	closable: bool = True


@typing.runtime_checkable
class DocumentViews (typing.Protocol):

	"""
	Protocol for the widget layer that shows one editor per document.
	"""

	def open (self, document: Document) -> None:

		"""
		Create the editor for a newly added document.
		"""

		...

	def close (self, document_id: int) -> None:

		"""
		Dispose of the editor for a document that has left the session.
		"""

		...


class DocumentSession:

	"""Ordered set of open documents plus the active one."""

	def __init__ (self, views: typing.Optional[DocumentViews] = None) -> None:

		"""Start with no documents, optionally mirroring changes to a widget layer."""

		self._views = views
		self._documents: typing.List[Document] = []
		self._active: typing.Optional[Document] = None
		self._next_id = 1

	def __len__ (self) -> int:

		return len(self._documents)

	def __contains__ (self, document_id: object) -> bool:

		return any(doc.id == document_id for doc in self._documents)

	@property
	def documents (self) -> typing.Tuple[Document, ...]:

		"""Open documents in tab order."""

		return tuple(self._documents)

	@property
	def active (self) -> typing.Optional[Document]:

		"""The active document, or ``None`` when the session is empty."""

		return self._active

	def _default_title (self) -> str:

		titles = {doc.title for doc in self._documents}

		if DEFAULT_TITLE not in titles:
			return DEFAULT_TITLE

		n = 2
		while f"{DEFAULT_TITLE} {n}" in titles:
			n += 1

		return f"{DEFAULT_TITLE} {n}"

	def create_document (self, source: str = "", title: typing.Optional[str] = None, closable: bool = True) -> int:

		"""Append a new document, make it active, and return its id.

		The editor is opened first; if that fails the session is left as it was.
		"""

		document = Document(
			id = self._next_id,
			title = title if title is not None else self._default_title(),
			source = source,
			closable = closable
		)
		self._next_id += 1

		if self._views is not None:
			self._views.open(document)

		self._documents.append(document)
		self._active = document

		logger.debug(f"Opened document {document.id} ({document.title!r})")

		return document.id

	def get (self, document_id: int) -> Document:

		"""Return the open document with this id or raise ``UnknownDocument``."""

		for doc in self._documents:
			if doc.id == document_id:
				return doc

		raise sidshell.errors.UnknownDocument(document_id)

	def set_active (self, document_id: int) -> None:

		"""Make an open document the active one."""

		self._active = self.get(document_id)

	def set_source (self, document_id: int, text: str) -> None:

		"""Replace a document's source text."""

		self.get(document_id).source = text

	def rename (self, document_id: int, title: str) -> None:

		"""Change a document's title."""

		self.get(document_id).title = title

	def get_active_source (self) -> str:

		"""Return the active document's source text as it is right now."""

		if self._active is None:
			raise sidshell.errors.NoActiveDocument("Reading source")

		return self._active.source

	def close_active (self) -> Document:

		"""Remove the active document and return it.

		The tab to the right of the closed one becomes active, or the one to
		its left when it was the last tab.  Raises ``NoActiveDocument`` on an
		empty session and ``CloseRefused`` for a document that is not closable,
		in which case nothing changes.
		"""

		document = self._active

		if document is None:
			raise sidshell.errors.NoActiveDocument("Close")

		if not document.closable:
			raise sidshell.errors.CloseRefused(document.id, document.title)

		index = self._documents.index(document)
		del self._documents[index]

		if self._documents:
			self._active = self._documents[min(index, len(self._documents) - 1)]
		else:
			self._active = None

		if self._views is not None:
			self._views.close(document.id)

		logger.debug(f"Closed document {document.id} ({document.title!r})")

		return document

	def close_all (self, on_closed: typing.Optional[typing.Callable[[Document], None]] = None) -> typing.List[Document]:

		"""Close documents until the session is empty and return them in closing order.

		Runs at most one ``close_active`` per document that was open at the
		start.  A refusal stops the loop and propagates; the documents closed
		before it stay closed and have already been passed to ``on_closed``.
		"""

		closed: typing.List[Document] = []

		for _ in range(len(self._documents)):

			if self._active is None:
				break

			document = self.close_active()
			closed.append(document)

			if on_closed is not None:
				on_closed(document)

		return closed
