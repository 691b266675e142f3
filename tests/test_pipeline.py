import typing

import pytest

import sidshell.bench
import sidshell.errors
import sidshell.pipeline


@pytest.fixture
def measurements () -> typing.List[sidshell.bench.Measurement]:

	return []


@pytest.fixture
def orchestrator (compiler, assembler, measurements) -> sidshell.pipeline.PipelineOrchestrator:

	bench = sidshell.bench.Bench(sinks=[measurements.append])
	return sidshell.pipeline.PipelineOrchestrator(compiler, assembler, bench=bench)


# --- targets ---


@pytest.mark.parametrize("target, filename, player, assembles", [
	(sidshell.pipeline.BuildTarget.PLAY, "Untitled.sid", False, True),
	(sidshell.pipeline.BuildTarget.EXPORT_SOUND_FILE, "Untitled.sid", False, True),
	(sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY, "Untitled.asm", False, False),
	(sidshell.pipeline.BuildTarget.EXPORT_PLAYER_PROGRAM, "Untitled.prg", True, True),
])
def test_target_profiles (orchestrator, target, filename, player, assembles) -> None:

	"""Each target picks its compile configuration, stages and output name."""

	artifact = orchestrator.build(target, "ab")

	assert artifact.filename == filename
	assert target.player is player
	assert target.assembles is assembles
	assert artifact.is_binary is assembles


def test_from_key () -> None:

	assert sidshell.pipeline.BuildTarget.from_key("prg") is sidshell.pipeline.BuildTarget.EXPORT_PLAYER_PROGRAM

	with pytest.raises(ValueError, match="wav"):
		sidshell.pipeline.BuildTarget.from_key("wav")


def test_mime_types (orchestrator) -> None:

	asm = orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY, "a")
	sid = orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_SOUND_FILE, "a")

	assert asm.mime_type == "text/plain;charset=utf-8"
	assert sid.mime_type == "application/octet-binary"


# --- stages ---


def test_play_runs_compile_then_assemble (orchestrator, call_log) -> None:

	artifact = orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "AB")

	assert call_log.names() == ["compile", "assemble"]
	assert artifact.data == bytes([65, 66])


def test_export_assembly_never_assembles (orchestrator, call_log) -> None:

	"""The assembly target returns compiler output and never calls the assembler."""

	artifact = orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY, "A")

	assert call_log.count("assemble") == 0
	assert artifact.data == "; sid\n.byte 65\n"


def test_player_program_compiles_in_player_configuration (orchestrator, call_log) -> None:

	artifact = orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_PLAYER_PROGRAM, "A")

	assert call_log.calls[0] == ("compile", "A", True)
	assert artifact.data == bytes([0x4C, 65])


def test_other_targets_compile_without_player (orchestrator, call_log) -> None:

	for target in (sidshell.pipeline.BuildTarget.PLAY, sidshell.pipeline.BuildTarget.EXPORT_SOUND_FILE, sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY):
		orchestrator.build(target, "x")

	assert [call[2] for call in call_log.calls if call[0] == "compile"] == [False, False, False]


def test_stages_are_timed_by_name (orchestrator, measurements) -> None:

	orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "A")

	assert [m.stage for m in measurements] == ["compile", "assemble"]


def test_assembly_target_times_compile_only (orchestrator, measurements) -> None:

	orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY, "A")

	assert [m.stage for m in measurements] == ["compile"]


# --- failures ---


def test_compile_failure_skips_assemble (orchestrator, call_log, measurements) -> None:

	"""Malformed source raises CompileError and the assembler is never invoked."""

	with pytest.raises(sidshell.errors.CompileError) as info:
		orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "syntax error here")

	assert info.value.diagnostic == "line 1: unexpected token"
	assert info.value.stage == "compile"
	assert info.value.target == "play"
	assert isinstance(info.value.__cause__, ValueError)
	assert call_log.count("assemble") == 0
	assert [(m.stage, m.failed) for m in measurements] == [("compile", True)]


def test_assemble_failure (orchestrator) -> None:

	with pytest.raises(sidshell.errors.AssembleError) as info:
		orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_SOUND_FILE, "bad-asm")

	assert "lda #$zz" in info.value.diagnostic
	assert info.value.stage == "assemble"


def test_object_code_out_of_byte_range_is_assemble_error (compiler) -> None:

	class WideAssembler:
		def assemble (self, assembly: str) -> dict:
			return {"object_code": [256]}

	orchestrator = sidshell.pipeline.PipelineOrchestrator(compiler, WideAssembler())

	with pytest.raises(sidshell.errors.AssembleError):
		orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "A")


def test_object_code_attribute_accepted (compiler) -> None:

	class Result:
		object_code = [1, 2]

	class AttributeAssembler:
		def assemble (self, assembly: str) -> Result:
			return Result()

	orchestrator = sidshell.pipeline.PipelineOrchestrator(compiler, AttributeAssembler())

	assert orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "A").data == b"\x01\x02"


def test_compiler_returning_non_text_is_compile_error (assembler) -> None:

	class BytesCompiler:
		def compile (self, source: str, config: sidshell.pipeline.CompilerConfig) -> bytes:
			return b"nop"

	orchestrator = sidshell.pipeline.PipelineOrchestrator(BytesCompiler(), assembler)

	with pytest.raises(sidshell.errors.CompileError, match="bytes"):
		orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "A")


def test_failure_does_not_poison_next_build (orchestrator) -> None:

	with pytest.raises(sidshell.errors.CompileError):
		orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "error")

	assert orchestrator.running is None
	assert orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "A").data == b"A"


# --- determinism / single flight ---


@pytest.mark.parametrize("target", list(sidshell.pipeline.BuildTarget))
def test_builds_are_deterministic (orchestrator, target) -> None:

	"""Building the same source twice gives identical artifacts."""

	first = orchestrator.build(target, "t120 cdefg")
	second = orchestrator.build(target, "t120 cdefg")

	assert first == second


def test_reentrant_build_is_rejected (assembler) -> None:

	"""A build started while another is running raises BuildInProgress."""

	orchestrator: sidshell.pipeline.PipelineOrchestrator
	errors: typing.List[sidshell.errors.BuildInProgress] = []

	class ReentrantCompiler:
		def compile (self, source: str, config: sidshell.pipeline.CompilerConfig) -> str:
			with pytest.raises(sidshell.errors.BuildInProgress) as info:
				orchestrator.build(sidshell.pipeline.BuildTarget.EXPORT_ASSEMBLY, source)
			errors.append(info.value)
			return ".byte 1\n"

	orchestrator = sidshell.pipeline.PipelineOrchestrator(ReentrantCompiler(), assembler)
	artifact = orchestrator.build(sidshell.pipeline.BuildTarget.PLAY, "A")

	assert artifact.data == b"\x01"
	assert errors[0].running == "play"
	assert errors[0].requested == "asm"
