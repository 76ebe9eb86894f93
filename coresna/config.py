"""
Run configuration for the core-group analysis.

Every knob that changes a result lives here as an explicit, validated
field; nothing is read from module globals at analysis time.
"""

import os
from typing import Optional, Tuple, Union, get_args

from pydantic import BaseModel, Field, field_validator

CliqueTarget = Union[int, str]


class AnalysisConfig(BaseModel):
    top_k: int = Field(
        default=50, ge=0,
        description="How many of the most active participants to keep in the ranked subgraph.",
    )
    clique_target: CliqueTarget = Field(
        default="largest",
        description="Clique size feeding the core set: an exact size, or 'largest' for the maximum observed.",
    )
    core_clique_limit: Optional[int] = Field(
        default=2, ge=1,
        description="Union only the first N matching cliques into the core set (None = all of them).",
    )
    clique_min_size: int = Field(
        default=1, ge=1,
        description="Smallest maximal clique worth reporting.",
    )
    max_cliques: Optional[int] = Field(
        default=None, ge=1,
        description="Abandon clique enumeration after this many cliques (partial result).",
    )
    clique_time_budget: Optional[float] = Field(
        default=None, gt=0,
        description="Abandon clique enumeration after this many seconds (partial result).",
    )
    eigen_tol: float = Field(
        default=1e-8, gt=0,
        description="Power iteration stops once no component moves by more than this.",
    )
    eigen_max_iter: int = Field(
        default=1000, ge=1,
        description="Power iteration cap; hitting it flags the result as non-convergent.",
    )
    normalized_betweenness: bool = Field(
        default=True,
        description="Divide betweenness by (n-1)(n-2).",
    )
    sentinels: Tuple[Union[int, str], ...] = Field(
        default=(0, "0", ""),
        description="Identifier values meaning 'no address'; edges touching them are dropped.",
    )
    community_seed: int = Field(
        default=42,
        description="Random state handed to Louvain so partitions are reproducible.",
    )
    workers: int = Field(
        default=1, ge=1,
        description="Threads used to compute the independent centralities.",
    )

    model_config = {"frozen": True}

    @field_validator("clique_target")
    @classmethod
    def _check_clique_target(cls, value):
        if isinstance(value, str):
            if value.strip().isdigit():
                value = int(value)
            elif value != "largest":
                raise ValueError("clique_target must be a positive size or 'largest'")
        if isinstance(value, int) and value < 1:
            raise ValueError("clique_target must be a positive size or 'largest'")
        return value

    @classmethod
    def from_env(cls, prefix: str = "CORESNA_", **overrides) -> "AnalysisConfig":
        """Build a config from ``CORESNA_*`` environment variables.

        ``CORESNA_TOP_K=25`` sets ``top_k`` and so on. Optional fields
        accept ``none``. Explicit keyword overrides win over the environment.
        """
        values = {}
        for name, field in cls.model_fields.items():
            if name == "sentinels":
                continue
            raw = os.environ.get(f"{prefix}{name.upper()}")
            if raw is None or raw == "":
                continue
            nullable = type(None) in get_args(field.annotation)
            values[name] = None if nullable and raw.strip().lower() == "none" else raw
        values.update(overrides)
        return cls(**values)
