"""
sidshell - the application controller of a SID music tracker.

A tracker document is plain source text.  sidshell keeps the open documents,
turns the active one into a sound-chip program through an external compiler
and 6502 assembler, and then plays the program on an external SID engine or
exports it:

- **Play** - compile, assemble, load at address 0 and play continuously.
- **Export SID file** - the same program saved as ``Untitled.sid``.
- **Export assembly** - the compiler output only, saved as ``Untitled.asm``.
- **Export player program** - compiled in player configuration and
  assembled into a stand-alone ``Untitled.prg``.

Each pipeline stage is timed and logged (``[bench] compile took 2.4ms``).
Three auxiliary panels (piano roll, instrument editor, oscilloscope) are
toggled by name, one instance each.

Minimal example:

    ```python
    import sidshell

    app = sidshell.AppController(compiler=my_compiler, assembler=my_assembler, engine=my_engine)

    app.new_document(source="t120 o4 l8 cdefgab>c")
    app.play()
    app.stop()

    app.export_sid()
    app.toggle_panel("oscilloscope")
    ```

From the command line, with backends named in ``sidshell.yaml``::

    python -m sidshell build song.mml --target prg --out build/
    python -m sidshell play song.mml
    python -m sidshell serve

Package-level exports: ``AppController``, ``BuildTarget``, ``CommandTable``, ``DocumentSession``,
``PanelVisibilityState``, ``PipelineOrchestrator``.
"""

import sidshell.app
import sidshell.commands
import sidshell.documents
import sidshell.panels
import sidshell.pipeline


AppController = sidshell.app.AppController
BuildTarget = sidshell.pipeline.BuildTarget
CommandTable = sidshell.commands.CommandTable
DocumentSession = sidshell.documents.DocumentSession
PanelVisibilityState = sidshell.panels.PanelVisibilityState
PipelineOrchestrator = sidshell.pipeline.PipelineOrchestrator
