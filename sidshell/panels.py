"""Auxiliary tool panels and their shown/hidden state.

The set of panels is fixed (see :data:`PANELS`).  :class:`PanelVisibilityState`
only holds a boolean per panel; the controller consults it and then asks a
:class:`PanelLayout` to insert or remove the matching placeholder, so at most
one instance of each panel is ever visible.
"""

import dataclasses
import logging
import typing

import sidshell.errors


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class PanelSpec:

	"""
	Description of one auxiliary panel placeholder.

	Attributes:
		name: Key used by toggles, commands and OSC addresses.
		title: Tab caption.
		color: Style class of the placeholder.
		closable: Whether the placeholder shows its own close button.
	"""

	name: str
	title: str
	color: str
	closable: bool = True


PANELS: typing.Tuple[PanelSpec, ...] = (
	PanelSpec(name="piano_roll", title="Piano Roll", color="green"),
	PanelSpec(name="instrument_editor", title="Instrument Editor", color="red"),
	PanelSpec(name="oscilloscope", title="Oscilloscope", color="blue"),
)


def panel_spec (name: str) -> PanelSpec:

	"""Look up a panel by name, raising ``UnknownPanel`` when it is not in the catalogue."""

	for spec in PANELS:
		if spec.name == name:
			return spec

	raise sidshell.errors.UnknownPanel(name, [spec.name for spec in PANELS])


class PanelVisibilityState:

	"""Shown/hidden flag for each panel in a fixed set, all hidden initially."""

	def __init__ (self, names: typing.Optional[typing.Iterable[str]] = None) -> None:

		"""Track the given panel names, or every panel in :data:`PANELS`."""

		if names is None:
			names = [spec.name for spec in PANELS]

		self._shown: typing.Dict[str, bool] = {name: False for name in names}

	@property
	def names (self) -> typing.Tuple[str, ...]:

		return tuple(self._shown)

	def is_shown (self, name: str) -> bool:

		"""Return the stored flag for a panel."""

		self._check(name)
		return self._shown[name]

	def shown (self) -> typing.List[str]:

		"""Names of the panels currently shown."""

		return [name for name, flag in self._shown.items() if flag]

	def toggle (self, name: str) -> bool:

		"""Flip a panel's flag and return the new value."""

		self._check(name)
		self._shown[name] = not self._shown[name]

		return self._shown[name]

	def _check (self, name: str) -> None:

		if name not in self._shown:
			raise sidshell.errors.UnknownPanel(name, self._shown)


@typing.runtime_checkable
class PanelLayout (typing.Protocol):

	"""
	Protocol for the dock area that hosts panel placeholders.
	"""

	def insert (self, spec: PanelSpec) -> None:

		"""
		Attach a placeholder for the panel.
		"""

		...

	def remove (self, name: str) -> None:

		"""
		Detach the placeholder for the panel.
		"""

		...

	def closed (self, name: str) -> None:

		"""
		Forget a placeholder the user already closed with its own button.
		"""

		...


class HeadlessLayout:

	"""Panel layout with no widgets, used when running without a window."""

	def __init__ (self) -> None:

		self.attached: typing.List[str] = []

	def insert (self, spec: PanelSpec) -> None:

		if spec.name in self.attached:
			raise ValueError(f"Panel {spec.name!r} is already attached")

		self.attached.append(spec.name)
		logger.info(f"Panel shown: {spec.title}")

	def remove (self, name: str) -> None:

		self.attached.remove(name)
		logger.info(f"Panel hidden: {panel_spec(name).title}")

	def closed (self, name: str) -> None:

		if name in self.attached:
			self.attached.remove(name)
			logger.info(f"Panel closed: {panel_spec(name).title}")
