"""Per-stage timing instrumentation for the build pipeline.

Wrap any callable in :meth:`Bench.measure` to time it::

	bench = Bench()
	asm = bench.measure("compile", compiler.compile, source)

Each call keeps its own start and stop timestamps on the stack, so nested
and re-entrant measurements never disturb each other.  The elapsed time is
reported to the ``sidshell.bench`` logger and to any extra sinks.
"""

import dataclasses
import logging
import time
import typing


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Measurement:

	"""
	One timed stage.

	Attributes:
		stage: The stage name the caller passed to ``measure``.
		seconds: Elapsed wall-clock time.
		failed: ``True`` when the measured callable raised.
		depth: How many ``measure`` calls enclosed this one (0 = outermost).
	"""

	stage: str
	seconds: float
	failed: bool = False
	depth: int = 0

	@property
	def milliseconds (self) -> float:

		"""Elapsed time in milliseconds."""

		return self.seconds * 1000.0


SinkType = typing.Callable[[Measurement], None]


class Bench:

	"""Times named stages and reports each measurement to its sinks."""

	def __init__ (
		self,
		sinks: typing.Optional[typing.Iterable[SinkType]] = None,
		clock: typing.Callable[[], float] = time.perf_counter
	) -> None:

		"""Create a bench with optional extra sinks and an injectable clock."""

		self._sinks: typing.List[SinkType] = list(sinks or [])
		self._clock = clock
		self._depth = 0

	def add_sink (self, sink: SinkType) -> None:

		"""Attach another receiver of measurements."""

		self._sinks.append(sink)

	def remove_sink (self, sink: SinkType) -> None:

		"""Detach a receiver added with :meth:`add_sink`."""

		self._sinks.remove(sink)

	def measure (self, stage: str, callback: typing.Callable[..., typing.Any], *args: typing.Any, **kwargs: typing.Any) -> typing.Any:

		"""Call ``callback(*args, **kwargs)``, report how long it took, and return its result.

		A failure raised by the callback is re-raised unchanged after the
		measurement has been reported.  A sink that fails while a failure is
		being reported is logged and skipped.
		"""

		depth = self._depth
		self._depth += 1
		start = self._clock()

		try:
			result = callback(*args, **kwargs)

		except BaseException:
			self._depth = depth
			self._report(Measurement(stage=stage, seconds=self._clock() - start, failed=True, depth=depth))
			raise

		self._depth = depth
		self._report(Measurement(stage=stage, seconds=self._clock() - start, failed=False, depth=depth))

		return result

	def _report (self, measurement: Measurement) -> None:

		if measurement.failed:
			logger.info(f"[bench] {measurement.stage} failed after {measurement.milliseconds:.1f}ms")
		else:
			logger.info(f"[bench] {measurement.stage} took {measurement.milliseconds:.1f}ms")

		for sink in list(self._sinks):

			if not measurement.failed:
				sink(measurement)
				continue

			# The stage's own error is already in flight.
			try:
				sink(measurement)
			except Exception as exc:
				logger.warning(f"[bench] sink failed while reporting {measurement.stage}: {exc!r}")


_default_bench = Bench()


def measure (stage: str, callback: typing.Callable[..., typing.Any], *args: typing.Any, **kwargs: typing.Any) -> typing.Any:

	"""Time ``callback`` on a module-level bench that only reports to the log."""

	return _default_bench.measure(stage, callback, *args, **kwargs)
