"""OSC remote control for a running controller.

Start it with ``python -m sidshell serve``.  The server listens on a UDP port
(default 9000) for commands and sends state updates to a target host/port
(default 127.0.0.1:9001).  Every command runs through the controller's
:class:`~sidshell.commands.CommandTable`, so remote and menu actions are the same.

Receive Handlers
────────────────
- ``/cmd/<name>``: Run any catalogue command by name (``/cmd/export_prg``)
- ``/new``, ``/close``, ``/close_all``: Shorthands for the File commands
- ``/play``, ``/stop``: Start or stop playback of the active document
- ``/export/sid``, ``/export/asm``, ``/export/prg``: Export the active document
- ``/panel/<name>``: Toggle an auxiliary panel (the ``view_<name>`` command)
- ``/source <string>``: Replace the active document's source

Send Events
───────────
- ``/bench <string> <float>``: Stage name and duration in milliseconds
- ``/playing <int>``: 1 when playback starts, 0 when it stops
- ``/panel/<name> <int>``: 1 when a panel is shown, 0 when hidden
- ``/error <string> <string>``: Error class name and message of a failed command
"""

import asyncio
import logging
import typing

import pythonosc.dispatcher
import pythonosc.osc_server
import pythonosc.udp_client

import sidshell.bench
import sidshell.commands

if typing.TYPE_CHECKING:
	from sidshell.app import AppController


logger = logging.getLogger(__name__)

# Fixed addresses and the catalogue command each one runs.
COMMAND_ADDRESSES: typing.Dict[str, str] = {
	"/new": "new",
	"/close": "close",
	"/close_all": "close_all",
	"/play": "play",
	"/stop": "stop",
	"/export/sid": "export_sid",
	"/export/asm": "export_asm",
	"/export/prg": "export_prg",
}


class OscServer:

	"""Async OSC server/client driving an :class:`~sidshell.app.AppController`."""

	def __init__ (
		self,
		app: "AppController",
		receive_port: int = 9000,
		send_port: int = 9001,
		send_host: str = "127.0.0.1"
	) -> None:

		self._app = app
		self._receive_port = receive_port
		self._send_port = send_port
		self._send_host = send_host

		self.commands = sidshell.commands.CommandTable(app)

		self._server: typing.Optional[typing.Any] = None
		self._transport: typing.Optional[asyncio.BaseTransport] = None
		self._client: typing.Optional[pythonosc.udp_client.SimpleUDPClient] = None
		self._dispatcher = pythonosc.dispatcher.Dispatcher()

		for address in COMMAND_ADDRESSES:
			self._dispatcher.map(address, self._handle_command)

		self._dispatcher.map("/cmd/*", self._handle_command)
		self._dispatcher.map("/panel/*", self._handle_panel)
		self._dispatcher.map("/source", self._handle_source)

		app.on_event("stage_timed", self._send_bench)
		app.on_event("playback_started", lambda size: self.send("/playing", 1))
		app.on_event("playback_stopped", lambda: self.send("/playing", 0))
		app.on_event("panel_toggled", lambda name, shown: self.send(f"/panel/{name}", int(shown)))


	@property
	def port (self) -> typing.Optional[int]:

		"""The UDP port actually bound, once started."""

		if self._transport is None:
			return None

		return int(self._transport.get_extra_info("sockname")[1])


	async def start (self) -> None:

		"""Start the OSC server and client."""

		self._client = pythonosc.udp_client.SimpleUDPClient(self._send_host, self._send_port)

		self._server = pythonosc.osc_server.AsyncIOOSCUDPServer(
			("0.0.0.0", self._receive_port),
			self._dispatcher,
			asyncio.get_running_loop()  # type: ignore[arg-type]
		)

		transport, _ = await self._server.create_serve_endpoint()
		self._transport = transport

		logger.info(f"OSC listening on :{self._receive_port}, sending to {self._send_host}:{self._send_port}")


	async def stop (self) -> None:

		"""Stop the OSC server."""

		if self._transport:
			self._transport.close()
			self._transport = None
			logger.info("OSC server stopped")


	def send (self, address: str, *args: typing.Any) -> None:

		"""Send an OSC message."""

		if self._client:
			try:
				self._client.send_message(address, args)
			except Exception as e:
				logger.warning(f"OSC send error: {e}")


	def _send_bench (self, measurement: sidshell.bench.Measurement) -> None:

		self.send("/bench", measurement.stage, float(measurement.milliseconds))


	def _run (self, address: str, action: typing.Callable[[], typing.Any]) -> None:

		"""Run one controller action, reporting any failure back to the sender."""

		try:
			action()
		except Exception as exc:
			logger.warning(f"OSC {address} failed: {exc}")
			self.send("/error", type(exc).__name__, str(exc))


	# Handlers

	def _handle_command (self, address: str, *args: typing.Any) -> None:

		if address in COMMAND_ADDRESSES:
			name = COMMAND_ADDRESSES[address]
		else:
			# address is like /cmd/export_prg
			name = address.split("/", 2)[2]

		self._run(address, lambda: self.commands.invoke(name))

	def _handle_panel (self, address: str, *args: typing.Any) -> None:
		name = address.split("/", 2)[2]
		self._run(address, lambda: self.commands.invoke(f"view_{name}"))

	def _handle_source (self, address: str, *args: typing.Any) -> None:
		if not args or not isinstance(args[0], str):
			logger.warning(f"Invalid OSC source argument: {args[:1]}")
			return
		self._run(address, lambda: self._app.set_source(args[0]))
