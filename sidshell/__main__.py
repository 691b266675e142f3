import argparse
import asyncio
import logging
import pathlib
import sys
import time
import typing

import sidshell.app
import sidshell.backends
import sidshell.config
import sidshell.errors
import sidshell.export
import sidshell.osc


logger = logging.getLogger("sidshell")

_EXPORT_TARGETS = ("sid", "asm", "prg")


def build_controller (config: typing.Dict[str, typing.Any], out_dir: typing.Optional[str] = None) -> sidshell.app.AppController:

	"""
	Create a controller from a loaded configuration.
	"""

	backends = sidshell.backends.create_backends(config)

	app = sidshell.app.AppController(
		compiler = backends.compiler,
		assembler = backends.assembler,
		engine = backends.engine,
		emitter = sidshell.export.DirectoryEmitter(out_dir or config["export"]["directory"]),
		load_address = config["player"]["load_address"]
	)

	for name in config["panels"]["shown"]:
		app.toggle_panel(name)

	return app


def _open_source (app: sidshell.app.AppController, path: str) -> None:

	source = pathlib.Path(path).read_text(encoding="utf-8")
	document_id = app.new_document(source=source)
	app.session.rename(document_id, pathlib.Path(path).stem)
	app.pipeline.basename = pathlib.Path(path).stem


def _cmd_build (app: sidshell.app.AppController, args: argparse.Namespace) -> None:

	_open_source(app, args.source)

	exports = {
		"sid": app.export_sid,
		"asm": app.export_asm,
		"prg": app.export_player,
	}

	exports[args.target]()


def _cmd_play (app: sidshell.app.AppController, args: argparse.Namespace) -> None:

	_open_source(app, args.source)
	app.play()

	try:
		while True:
			time.sleep(1)
	except KeyboardInterrupt:
		logger.info("Stopping...")
	finally:
		app.stop()


def _cmd_serve (app: sidshell.app.AppController, args: argparse.Namespace, config: typing.Dict[str, typing.Any]) -> None:

	osc_config = config["osc"]

	server = sidshell.osc.OscServer(
		app,
		receive_port = osc_config["receive_port"],
		send_port = osc_config["send_port"],
		send_host = osc_config["send_host"]
	)

	async def _run () -> None:

		await server.start()

		try:
			await asyncio.Event().wait()
		finally:
			await server.stop()

	try:
		asyncio.run(_run())
	except KeyboardInterrupt:
		logger.info("Stopping...")
	finally:
		app.stop()


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the sidshell command line.
	"""

	parser = argparse.ArgumentParser(prog="sidshell", description="Compile, play and export SID music sources")
	parser.add_argument("--config", default=sidshell.config.DEFAULT_CONFIG_PATH, help="YAML config file (default: %(default)s)")
	parser.add_argument("--verbose", action="store_true", help="Log debug messages")

	sub = parser.add_subparsers(dest="command", required=True)

	build_parser = sub.add_parser("build", help="Export a source file")
	build_parser.add_argument("source", help="Source file to compile")
	build_parser.add_argument("--target", choices=_EXPORT_TARGETS, default="sid", help="Output format (default: sid)")
	build_parser.add_argument("--out", default=None, help="Output directory (default: export.directory from the config)")

	play_parser = sub.add_parser("play", help="Play a source file until interrupted")
	play_parser.add_argument("source", help="Source file to compile")

	sub.add_parser("serve", help="Run the OSC remote control until interrupted")

	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		config = sidshell.config.load_config(args.config)
		app = build_controller(config, out_dir=getattr(args, "out", None))

		if args.command == "build":
			_cmd_build(app, args)
		elif args.command == "play":
			_cmd_play(app, args)
		else:
			_cmd_serve(app, args, config)

	except (sidshell.errors.SidShellError, ValueError, OSError) as exc:
		print(f"sidshell: {exc}", file=sys.stderr)
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
