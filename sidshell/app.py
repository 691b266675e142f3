"""The application controller.

:class:`AppController` is the single entry point for every user action:
document management, play/stop, the three exports and panel toggles.  It
composes a :class:`~sidshell.documents.DocumentSession`, a
:class:`~sidshell.pipeline.PipelineOrchestrator`, a
:class:`~sidshell.playback.PlaybackController` and a
:class:`~sidshell.panels.PanelVisibilityState`, and talks to the outside
world through the file emitter and the panel layout.

Errors from the session, the pipeline and the engine reach the caller
unchanged.  State observers subscribe with :meth:`AppController.on_event`.
"""

import logging
import typing

import sidshell.bench
import sidshell.documents
import sidshell.errors
import sidshell.event_emitter
import sidshell.export
import sidshell.panels
import sidshell.pipeline
import sidshell.playback


logger = logging.getLogger(__name__)

EVENTS = (
	"document_created",
	"document_closed",
	"active_changed",
	"stage_timed",
	"build_finished",
	"playback_started",
	"playback_stopped",
	"panel_toggled",
	"exported",
)


class AppController:

	"""Owns the editing session and drives builds, playback, exports and panels."""

	def __init__ (
		self,
		compiler: sidshell.pipeline.Compiler,
		assembler: sidshell.pipeline.Assembler,
		engine: typing.Optional[sidshell.playback.AudioEngine] = None,
		emitter: typing.Optional[sidshell.export.FileEmitter] = None,
		layout: typing.Optional[sidshell.panels.PanelLayout] = None,
		views: typing.Optional[sidshell.documents.DocumentViews] = None,
		load_address: int = sidshell.playback.LOAD_ADDRESS,
		basename: str = sidshell.pipeline.DEFAULT_BASENAME
	) -> None:

		"""Wire the collaborators together.

		Parameters:
			compiler: Source-to-assembly backend.
			assembler: Assembly-to-object-code backend.
			engine: Audio engine; without one ``play()`` raises ``PlaybackError``.
			emitter: Receives exported files; defaults to the current directory.
			layout: Dock area for panel placeholders; defaults to a headless one.
			views: Editor widget layer mirrored by the session.
			load_address: Where programs are loaded into the engine.
			basename: Stem of exported file names.
		"""

		self.events = sidshell.event_emitter.EventEmitter(EVENTS)

		self.session = sidshell.documents.DocumentSession(views)
		self.bench = sidshell.bench.Bench(sinks=[self._on_measurement])
		self.pipeline = sidshell.pipeline.PipelineOrchestrator(compiler, assembler, bench=self.bench, basename=basename)
		self.playback = sidshell.playback.PlaybackController(engine, load_address=load_address)
		self.panels = sidshell.panels.PanelVisibilityState()

		self._emitter: sidshell.export.FileEmitter = emitter if emitter is not None else sidshell.export.DirectoryEmitter()
		self._layout: sidshell.panels.PanelLayout = layout if layout is not None else sidshell.panels.HeadlessLayout()

	def on_event (self, event_name: str, callback: typing.Callable[..., typing.Any]) -> None:

		"""Register a listener for one of :data:`EVENTS`."""

		self.events.on(event_name, callback)

	def _on_measurement (self, measurement: sidshell.bench.Measurement) -> None:

		self.events.emit("stage_timed", measurement)

	# Documents

	@property
	def current_document (self) -> typing.Optional[sidshell.documents.Document]:

		return self.session.active

	def new_document (self, source: str = "") -> int:

		"""Open a new document and make it active."""

		document_id = self.session.create_document(source=source)
		document = self.session.get(document_id)

		self.events.emit("document_created", document)
		self.events.emit("active_changed", document)

		return document_id

	def set_current_document (self, document_id: int) -> None:

		"""Activate an open document."""

		self.session.set_active(document_id)
		self.events.emit("active_changed", self.session.active)

	def set_source (self, text: str) -> None:

		"""Replace the active document's source text."""

		document = self.session.active

		if document is None:
			raise sidshell.errors.NoActiveDocument("Editing")

		self.session.set_source(document.id, text)

	def close_document (self) -> None:

		"""Close the active document."""

		closed = self.session.close_active()
		self._closed(closed)

	def close_all_documents (self) -> None:

		"""Close every document, stopping at the first one that refuses."""

		closed: typing.List[sidshell.documents.Document] = []

		try:
			self.session.close_all(on_closed=closed.append)

		finally:
			for document in closed:
				self.events.emit("document_closed", document)

			if closed:
				self.events.emit("active_changed", self.session.active)

	def _closed (self, document: sidshell.documents.Document) -> None:

		self.events.emit("document_closed", document)
		self.events.emit("active_changed", self.session.active)

	# Builds

	def build (self, target: sidshell.pipeline.BuildTarget) -> sidshell.pipeline.PipelineArtifact:

		"""Build the active document's current source for ``target``."""

		source = self.session.get_active_source()
		artifact = self.pipeline.build(target, source)

		self.events.emit("build_finished", artifact)

		return artifact

	def play (self) -> None:

		"""Build the active document and play it, replacing anything already playing."""

		artifact = self.build(sidshell.pipeline.BuildTarget.PLAY)
		data = typing.cast(bytes, artifact.data)

		was_playing = self.playback.is_playing

		try:
			self.playback.play(data)
		except sidshell.errors.PlaybackError:
			# The previous run was stopped before the new one failed to start.
			if was_playing and not self.playback.is_playing:
				self.events.emit("playback_stopped")
			raise

		self.events.emit("playback_started", len(data))

	def stop (self) -> None:

		"""Stop playback; does nothing when nothing is playing."""

		if not self.playback.is_playing:
			return

		try:
			self.playback.stop()
		except sidshell.errors.PlaybackError:
			if not self.playback.is_playing:
				self.events.emit("playback_stopped")
			raise

		self.events.emit("playback_stopped")

	def export_sid (self) -> sidshell.pipeline.PipelineArtifact:

		"""Export the active document as a ``.sid`` file."""

		return self._export(sidshell.pipeline.BuildTarget.EXPORT_SOUND_FILE)

	def export_asm (self) -> sidshell.pipeline.PipelineArtifact:

		"""Export the compiled assembly of the active document as a ``.asm`` file."""

		return self._export(sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY)

	def export_player (self) -> sidshell.pipeline.PipelineArtifact:

		"""Export the active document as a stand-alone ``.prg`` player program."""

		return self._export(sidshell.pipeline.BuildTarget.EXPORT_PLAYER_PROGRAM)

	def _export (self, target: sidshell.pipeline.BuildTarget) -> sidshell.pipeline.PipelineArtifact:

		artifact = self.build(target)

		self._emitter.save(artifact.data, artifact.filename, artifact.mime_type)
		self.events.emit("exported", artifact.filename, artifact.mime_type)

		return artifact

	# Panels

	def toggle_panel (self, name: str) -> bool:

		"""Show or hide an auxiliary panel and return whether it is now shown."""

		spec = sidshell.panels.panel_spec(name)
		shown = self.panels.toggle(name)

		try:
			if shown:
				self._layout.insert(spec)
			else:
				self._layout.remove(name)

		except Exception:
			# Keep the flag in step with what the layout actually shows.
			self.panels.toggle(name)
			raise

		self.events.emit("panel_toggled", name, shown)

		return shown

	def panel_closed (self, name: str) -> None:

		"""Record that a panel was closed from its own close button."""

		if not self.panels.is_shown(name):
			return

		self.panels.toggle(name)
		self._layout.closed(name)
		self.events.emit("panel_toggled", name, False)
