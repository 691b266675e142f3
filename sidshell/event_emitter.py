import inspect
import typing


CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	A synchronous event emitter with a fixed vocabulary of event names.

	Listeners run in registration order on the caller's thread.  Exceptions
	raised by a listener propagate to whoever emitted the event.
	"""

	def __init__ (self, events: typing.Iterable[str]) -> None:

		"""
		Declare the event names this emitter accepts.
		"""

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {name: [] for name in events}


	@property
	def events (self) -> typing.Tuple[str, ...]:

		"""The declared event names."""

		return tuple(self._listeners)


	def _check (self, event_name: str) -> None:

		if event_name not in self._listeners:
			raise ValueError(f"Unknown event {event_name!r}. Available: {list(self._listeners)}")


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.

		Coroutine functions are rejected since nothing here awaits them.
		"""

		self._check(event_name)

		if inspect.iscoroutinefunction(callback):
			raise ValueError(f"Async callback cannot listen to {event_name!r}")

		self._listeners[event_name].append(callback)

	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		self._check(event_name)

		if callback not in self._listeners[event_name]:
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener of ``event_name`` with the given arguments.
		"""

		self._check(event_name)

		# Copy so a listener may unregister itself while being called.
		for callback in list(self._listeners[event_name]):
			callback(*args, **kwargs)
