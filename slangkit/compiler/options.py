"""Compile request options for slangc."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from slangkit.compiler.stage import Stage


@dataclass
class CompileShaderOptions:
    """
    A single slangc compile request.

    Every field that is set adds one flag/value pair, always in the order
    stage, profile, entry, target, followed by the input file. Values are
    passed through untouched; slangc validates them.
    """

    file: Union[str, Path]
    """File to compile"""

    stage: Optional[Stage] = None
    """-stage <stage>: Specify the stage of an entry-point function."""

    profile: Optional[str] = None
    """-profile <profile>: Specify the target profile."""

    entry_point: Optional[str] = None
    """-entry <entry-point>: Specify the entry-point function."""

    target: Optional[str] = None
    """-target <target>: Specify the target language."""

    def to_arguments(self) -> List[str]:
        """
        Build the slangc argument list (without the executable).

        Example:
            >>> CompileShaderOptions("a.slang", stage=Stage.VERTEX, target="spirv").to_arguments()
            ['-stage', 'vertex', '-target', 'spirv', 'a.slang']
        """
        args: List[str] = []
        if self.stage is not None:
            args += ["-stage", self.stage.token]
        if self.profile is not None:
            args += ["-profile", self.profile]
        if self.entry_point is not None:
            args += ["-entry", self.entry_point]
        if self.target is not None:
            args += ["-target", self.target]
        args.append(str(self.file))
        return args


__all__ = ["CompileShaderOptions"]
