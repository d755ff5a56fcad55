import os
from pathlib import Path
from typing import Union

from allotment_scraper.core.schemas import CrawlReport
from allotment_scraper.utils.constants import SUMMARY_FILENAME
from allotment_scraper.utils.helpers import safe_name


class CsvStorage:
    """
    Writes one CSV per (college, branch) under a per-crawl base directory.

    Layout: <base_dir>/<college>/<branch>.csv, both names cleaned with
    safe_name(). Directories are created when the first file lands in them.
    """

    def __init__(self, base_dir: Union[str, os.PathLike]):
        self.base_dir = Path(base_dir).resolve()

    def path_for(self, top_label: str, second_label: str) -> Path:
        return self.base_dir / safe_name(top_label) / f"{safe_name(second_label)}.csv"

    def save(self, top_label: str, second_label: str, text: str) -> Path:
        """Write CSV text for one leaf, replacing any earlier file. Returns the path."""
        if not text:
            raise ValueError(f"Refusing to write an empty file for {top_label} -> {second_label}")

        path = self.path_for(top_label, second_label)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        return path

    def save_summary(self, report: CrawlReport) -> Path:
        """Write the crawl report as JSON next to the college folders."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        path = self.base_dir / SUMMARY_FILENAME
        with open(path, "w", encoding="utf-8") as f:
            f.write(report.model_dump_json(indent=2))
        return path
