"""The application's command catalogue.

Every menu entry of the editor is listed here as data: a command name, the
menu it lives in, its label, its keyboard shortcut and the controller action
it runs.  Front ends build their menus from :meth:`CommandTable.menus`; remote
controls and scripts run commands by name with :meth:`CommandTable.invoke`.

Entries without an action (Open, Save, the Edit and Find menus...) are shown
disabled.  Invoking one only logs its label.
"""

import dataclasses
import logging
import typing

import sidshell.app
import sidshell.panels


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Command:

	"""
	A single menu entry.

	Attributes:
		name: Key used by :meth:`CommandTable.invoke`.
		menu: Title of the menu the entry belongs to.
		label: Entry caption, with ``&`` marking the mnemonic.
		shortcut: Keyboard shortcut text, or ``None``.
		action: What the entry does, or ``None`` for a disabled entry.
		checkable: ``True`` for entries that show a check mark.
		submenu: Title of the submenu the entry is nested in, if any.
	"""

	name: str
	menu: str
	label: str
	shortcut: typing.Optional[str] = None
	action: typing.Optional[typing.Callable[[], typing.Any]] = None
	checkable: bool = False
	submenu: typing.Optional[str] = None

	@property
	def enabled (self) -> bool:

		return self.action is not None


class CommandTable:

	"""All commands of an :class:`~sidshell.app.AppController`, in menu order."""

	def __init__ (self, app: sidshell.app.AppController) -> None:

		"""Build the catalogue bound to ``app``."""

		self._app = app
		self._commands: typing.Dict[str, Command] = {}

		for command in self._build(app):
			if command.name in self._commands:
				raise ValueError(f"Duplicate command name {command.name!r}")
			self._commands[command.name] = command

	@staticmethod
	def _build (app: sidshell.app.AppController) -> typing.List[Command]:

		def panel (name: str) -> typing.Callable[[], bool]:
			return lambda: app.toggle_panel(name)

		return [
			Command("new", "File", "New", "Ctrl+N", app.new_document),
			Command("open", "File", "Open", "Ctrl+O"),
			Command("save", "File", "Save", "Ctrl+S"),
			Command("save_as", "File", "Save As...", "Ctrl+Shift+S"),
			Command("export_sid", "File", "Export SID file", action=app.export_sid),
			Command("export_asm", "File", "Assembly code (.asm)", action=app.export_asm, submenu="Export to..."),
			Command("export_prg", "File", "Player program (.prg)", action=app.export_player, submenu="Export to..."),
			Command("close", "File", "Close", "Ctrl+W", app.close_document),
			Command("close_all", "File", "Close All", action=app.close_all_documents),

			Command("undo", "Edit", "&Undo", "Ctrl+Z"),
			Command("repeat", "Edit", "&Repeat", "Ctrl+Y"),
			Command("copy", "Edit", "&Copy", "Ctrl+C"),
			Command("cut", "Edit", "Cu&t", "Ctrl+X"),
			Command("paste", "Edit", "&Paste", "Ctrl+V"),

			Command("find", "Find", "Find...", "Ctrl+F"),
			Command("find_next", "Find", "Find Next", "F3"),
			Command("find_previous", "Find", "Find Previous", "Shift+F3"),
			Command("replace", "Find", "Replace...", "Ctrl+H"),
			Command("replace_next", "Find", "Replace Next", "Ctrl+Shift+H"),

			*[
				Command(f"view_{spec.name}", "View", spec.title, action=panel(spec.name), checkable=True)
				for spec in sidshell.panels.PANELS
			],

			Command("play", "Run", "Play", action=app.play),
			Command("stop", "Run", "Stop", action=app.stop),

			Command("documentation", "Help", "Documentation"),
			Command("about", "Help", "About"),
		]

	def __contains__ (self, name: object) -> bool:

		return name in self._commands

	def __iter__ (self) -> typing.Iterator[Command]:

		return iter(self._commands.values())

	def get (self, name: str) -> Command:

		"""Look a command up by name."""

		if name not in self._commands:
			raise ValueError(f"Unknown command {name!r}. Available: {list(self._commands)}")

		return self._commands[name]

	def menus (self) -> typing.Dict[str, typing.List[Command]]:

		"""Group the commands by menu title, preserving order."""

		grouped: typing.Dict[str, typing.List[Command]] = {}

		for command in self._commands.values():
			grouped.setdefault(command.menu, []).append(command)

		return grouped

	def is_checked (self, name: str) -> bool:

		"""Return whether a checkable View entry's panel is shown."""

		command = self.get(name)

		if not command.checkable:
			raise ValueError(f"Command {name!r} is not checkable")

		return self._app.panels.is_shown(name[len("view_"):])

	def invoke (self, name: str) -> typing.Any:

		"""Run a command and return its action's result.

		A disabled command logs its label and returns ``None``.  Errors raised
		by the action propagate.
		"""

		command = self.get(name)

		if command.action is None:
			logger.info(command.label)
			return None

		return command.action()
