"""
Command-line runner: CSV edge list in, core-group analysis files out.

    python -m coresna emails_edges.csv --out sna_output --top-k 50

Writes graph_data.json, node_metrics.csv, cliques.json and stats.json.
"""

import argparse
import json
import logging
import os
import sys

from pydantic import ValidationError

from coresna.config import AnalysisConfig
from coresna.errors import CoreSNAError
from coresna.pipeline import AnalysisResult, CoreGroupAnalyzer
from coresna.sources import read_edge_csv


def _clique_target(value: str):
    return value if value == "largest" else int(value)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="coresna",
        description="Find the densely connected core of an e-mail network.",
    )
    p.add_argument("edges", help="CSV edge list with sender / recipient columns")
    p.add_argument("--out", default="sna_output", help="output directory")
    p.add_argument("--from-col", default="from", help="sender column name")
    p.add_argument("--to-col", default="to", help="recipient column name")
    p.add_argument("--top-k", type=int, help="participants kept in the ranked subgraph")
    p.add_argument("--clique-target", type=_clique_target,
                   help="core clique size, or 'largest'")
    p.add_argument("--max-cliques", type=int, help="clique enumeration count budget")
    p.add_argument("--clique-time-budget", type=float,
                   help="clique enumeration time budget in seconds")
    p.add_argument("--workers", type=int, help="threads for the centrality suite")
    p.add_argument("--log-level", default="WARNING", help="logging level")
    p.add_argument("--quiet", action="store_true", help="no progress output")
    return p


def export_results(result: AnalysisResult, out: str) -> None:
    """Write every dataset a downstream visualization needs."""
    os.makedirs(out, exist_ok=True)
    sep = (",", ":")
    data = result.to_dict()

    with open(f"{out}/graph_data.json", "w") as f:
        json.dump({"nodes": data["nodes"], "edges": data["edges"]}, f, separators=sep)

    with open(f"{out}/cliques.json", "w") as f:
        json.dump(
            {"cliques": data["cliques"], "census": data["census"], "core_set": data["core_set"]},
            f, separators=sep,
        )

    result.nodes_frame().to_csv(f"{out}/node_metrics.csv")

    with open(f"{out}/stats.json", "w") as f:
        json.dump(data["stats"], f, indent=2)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = {
        "top_k": args.top_k,
        "clique_target": args.clique_target,
        "max_cliques": args.max_cliques,
        "clique_time_budget": args.clique_time_budget,
        "workers": args.workers,
    }
    try:
        config = AnalysisConfig.from_env(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        print(f"❌ Error: invalid configuration\n{exc}", file=sys.stderr)
        return 1

    if not os.path.exists(args.edges):
        print(f"❌ Error: {args.edges} not found.", file=sys.stderr)
        return 1

    raw = read_edge_csv(args.edges, args.from_col, args.to_col, progress=not args.quiet)
    try:
        result = CoreGroupAnalyzer(raw, config, verbose=not args.quiet).run()
    except CoreSNAError as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1

    export_results(result, args.out)
    if not args.quiet:
        print(f"\n✅  Done! Files in: {args.out}/")
        stats = result.summary()
        col_w = max(len(k) for k in stats) + 2
        for k, v in stats.items():
            print(f"   {k:<{col_w}} {v}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
