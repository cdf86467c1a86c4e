"""
CLI package: Command-Line Interface for graph editing and algorithm runs.

Design Patterns
───────────────
• Command       – each CLI operation is a ``Command`` object with
                  ``execute(workspace)``.
• Interpreter   – parsing the CLI syntax into structured command objects.
"""
from .command_processor import CommandProcessor
from .commands import (
    Command,
    CommandResult,
    CreateVertexCommand,
    EditVertexCommand,
    DeleteVertexCommand,
    CreateEdgeCommand,
    EditEdgeCommand,
    DeleteEdgeCommand,
    RunCommand,
    StepCommand,
    StopCommand,
    AnalyzeCommand,
    LayoutCommand,
    ClearCommand,
    UndoCommand,
    InfoCommand,
    HelpCommand,
    ListCommand,
)

__all__ = [
    'CommandProcessor',
    'Command',
    'CommandResult',
    'CreateVertexCommand',
    'EditVertexCommand',
    'DeleteVertexCommand',
    'CreateEdgeCommand',
    'EditEdgeCommand',
    'DeleteEdgeCommand',
    'RunCommand',
    'StepCommand',
    'StopCommand',
    'AnalyzeCommand',
    'LayoutCommand',
    'ClearCommand',
    'UndoCommand',
    'InfoCommand',
    'HelpCommand',
    'ListCommand',
]
