"""
Shader pipeline stages accepted by ``slangc -stage``.

Tokens follow the names slangc itself lists under ``-stage`` in its help
output, where the ray-tracing stages are written as single words
(``raygeneration``, ``anyhit``, ``closesthit``).
"""

from enum import Enum


class Stage(Enum):
    """-stage <stage>: Specify the stage of an entry-point function."""

    VERTEX = "vertex"
    HULL = "hull"
    DOMAIN = "domain"
    GEOMETRY = "geometry"
    FRAGMENT = "fragment"
    COMPUTE = "compute"
    RAY_GENERATION = "raygeneration"
    INTERSECTION = "intersection"
    ANY_HIT = "anyhit"
    CLOSEST_HIT = "closesthit"
    MISS = "miss"
    CALLABLE = "callable"
    MESH = "mesh"
    AMPLIFICATION = "amplification"

    @property
    def token(self) -> str:
        """Value passed after ``-stage`` on the command line."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Stage":
        """
        Look up a stage by token or member name, case-insensitively.

        Underscores are ignored, so 'ray_generation', 'RAY_GENERATION' and
        'raygeneration' all give RAY_GENERATION.

        Raises:
            ValueError: If no stage matches
        """
        key = name.strip().lower().replace("_", "").replace("-", "")
        for stage in cls:
            if stage.value == key:
                return stage
        raise ValueError(
            f"Unknown stage: {name}. Valid stages: {', '.join(s.value for s in cls)}"
        )

    def __str__(self) -> str:
        return self.value


__all__ = ["Stage"]
