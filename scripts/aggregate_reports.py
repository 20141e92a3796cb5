"""Aggregate persisted harness reports into CSV and Markdown summary sheets."""

from __future__ import annotations

import argparse
import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
LOG_DIR = PROJECT_ROOT / "harness_logs"
DOCS_DIR = PROJECT_ROOT / "docs" / "bias"

HEADER = [
    "report",
    "method",
    "min",
    "max",
    "range",
    "perfectly_divisible",
    "rejection_rate",
    "actual_samples",
    "chi_squared",
    "coefficient_of_variation",
    "max_deviation",
    "range_spread",
    "bias_level",
    "quality",
    "actual_rejection_rate",
    "rejected_count",
]


@dataclass
class ReportSummary:
    name: str
    method: str
    min_value: int
    max_value: int
    width: int
    perfectly_divisible: bool
    rejection_rate: str
    actual_samples: int
    chi_squared: float
    coefficient_of_variation: float
    max_deviation: float
    range_spread: int
    bias_level: str
    quality: str
    actual_rejection_rate: float
    rejected_count: int

    @classmethod
    def from_payload(cls, name: str, payload: dict) -> "ReportSummary":
        cfg = payload["config"]
        stats = payload["statistics"]
        analysis = payload["bias_analysis"]

        return cls(
            name=name,
            method="rejection_sampling" if cfg["use_rejection_sampling"] else "modulo_mapping",
            min_value=cfg["min_value"],
            max_value=cfg["max_value"],
            width=analysis["range"],
            perfectly_divisible=analysis["perfectly_divisible"],
            rejection_rate=analysis["rejection_rate"],
            actual_samples=stats["actual_samples"],
            chi_squared=stats["chi_squared"],
            coefficient_of_variation=stats["coefficient_of_variation"],
            max_deviation=stats["max_deviation"],
            range_spread=stats["range_spread"],
            bias_level=stats["bias_level"],
            quality=stats["quality"],
            actual_rejection_rate=stats["actual_rejection_rate"],
            rejected_count=stats["rejected_count"],
        )

    def as_csv_row(self) -> List[str]:
        return [
            self.name,
            self.method,
            str(self.min_value),
            str(self.max_value),
            str(self.width),
            str(self.perfectly_divisible).lower(),
            self.rejection_rate,
            str(self.actual_samples),
            f"{self.chi_squared:.4f}",
            f"{self.coefficient_of_variation:.4f}",
            f"{self.max_deviation:.2f}",
            str(self.range_spread),
            self.bias_level,
            self.quality,
            f"{self.actual_rejection_rate:.4f}",
            str(self.rejected_count),
        ]


def _summaries_from_payload(name: str, payload) -> List[ReportSummary]:
    # suite runs persist a list of {name, modulo, rejection} entries
    if isinstance(payload, list):
        summaries = []
        for entry in payload:
            for key in ("modulo", "rejection"):
                summaries.append(ReportSummary.from_payload(f"{name}:{entry['name']}", entry[key]))
        return summaries
    return [ReportSummary.from_payload(name, payload)]


def load_reports(log_dir: Path) -> List[ReportSummary]:
    paths = sorted(log_dir.glob("*.json"))
    if not paths:
        raise FileNotFoundError(f"No harness reports found in {log_dir}")

    summaries: List[ReportSummary] = []
    for path in paths:
        payload = json.loads(path.read_text())
        summaries.extend(_summaries_from_payload(path.stem, payload))
    return summaries


def write_csv(summaries: Iterable[ReportSummary], out_dir: Path) -> Path:
    csv_path = out_dir / "bias_summary.csv"
    with csv_path.open("w", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for summary in summaries:
            writer.writerow(summary.as_csv_row())
    return csv_path


def write_md(summaries: Iterable[ReportSummary], out_dir: Path) -> Path:
    md_path = out_dir / "bias_summary.md"
    table_header = (
        "| Report | Method | Range | Chi-squared | Max Dev | Bias Level | Quality |\n"
        "| --- | --- | --- | --- | --- | --- | --- |"
    )
    table_rows = [
        "| {name} | {method} | [{lo}, {hi}] | {chi:.4f} | {dev:.2f} | {level} | {quality} |".format(
            name=summary.name,
            method=summary.method,
            lo=summary.min_value,
            hi=summary.max_value,
            chi=summary.chi_squared,
            dev=summary.max_deviation,
            level=summary.bias_level,
            quality=summary.quality,
        )
        for summary in summaries
    ]

    content = [
        "# Range mapping bias summary",
        "",
        table_header,
        *table_rows,
    ]
    md_path.write_text("\n".join(content) + "\n")
    return md_path


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Summarise persisted harness reports")
    parser.add_argument("--logs", type=Path, default=LOG_DIR, help="Directory holding *.json reports")
    parser.add_argument("--out", type=Path, default=DOCS_DIR, help="Directory for the summary sheets")
    args = parser.parse_args(argv)

    summaries = load_reports(args.logs)
    args.out.mkdir(parents=True, exist_ok=True)
    write_csv(summaries, args.out)
    write_md(summaries, args.out)


if __name__ == "__main__":
    main()
