"""Persistence of scraped articles as JSON and CSV files."""

from __future__ import annotations

import csv
import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .config import DEFAULT_OUTPUT_DIR
from .models import ArticleRecord
from .utils import file_timestamp, utc_timestamp

logger = logging.getLogger("news_scout")

ACCUMULATED_FILENAME = "accumulated-news.json"
OUTPUT_FORMATS = ("json", "csv", "both")

# (attribute on ArticleRecord, CSV header)
CSV_COLUMNS = (
    ("title", "Title"),
    ("url", "URL"),
    ("description", "Description"),
    ("image", "Image URL"),
    ("date", "Date"),
    ("author", "Author"),
    ("scraped_at", "Scraped At"),
)


def articles_document(articles: Sequence[ArticleRecord]) -> Dict[str, object]:
    """Wrap articles in the {scrapedAt, totalArticles, articles} envelope."""
    return {
        "scrapedAt": utc_timestamp(),
        "totalArticles": len(articles),
        "articles": [article.to_dict() for article in articles],
    }


class StorageError(Exception):
    """Raised when articles cannot be written to or read from disk."""


class ArticleStorage:
    """Writes article batches into an output directory."""

    def __init__(self, output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR) -> None:
        self.output_dir = Path(output_dir)

    def ensure_output_dir(self) -> Path:
        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created output directory: %s", self.output_dir)
        return self.output_dir

    def _target(self, filename: Optional[str], extension: str) -> Path:
        self.ensure_output_dir()
        if not filename:
            filename = f"news-{file_timestamp()}.{extension}"
        return self.output_dir / filename

    def save_json(
        self,
        articles: Sequence[ArticleRecord],
        filename: Optional[str] = None,
    ) -> Path:
        filepath = self._target(filename, "json")
        data = articles_document(articles)
        try:
            filepath.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to save JSON: {exc}") from exc
        logger.info("Saved %d articles to %s", len(articles), filepath)
        return filepath

    def save_csv(
        self,
        articles: Sequence[ArticleRecord],
        filename: Optional[str] = None,
    ) -> Path:
        filepath = self._target(filename, "csv")
        try:
            with filepath.open("w", newline="", encoding="utf-8") as handle:
                writer = csv.writer(handle)
                writer.writerow([header for _, header in CSV_COLUMNS])
                for article in articles:
                    writer.writerow([getattr(article, attr) for attr, _ in CSV_COLUMNS])
        except OSError as exc:
            raise StorageError(f"Failed to save CSV: {exc}") from exc
        logger.info("Saved %d articles to %s", len(articles), filepath)
        return filepath

    def save_both(self, articles: Sequence[ArticleRecord]) -> Dict[str, Path]:
        return {
            "json": self.save_json(articles),
            "csv": self.save_csv(articles),
        }

    def save(
        self,
        articles: Sequence[ArticleRecord],
        fmt: str = "json",
        filename: Optional[str] = None,
    ) -> Dict[str, Path]:
        """Save in ``fmt`` (json, csv or both); returns the written paths by format."""
        if fmt == "csv":
            return {"csv": self.save_csv(articles, filename)}
        if fmt == "both":
            return self.save_both(articles)
        if fmt != "json":
            raise ValueError(f"Unknown output format {fmt!r}; expected one of {OUTPUT_FORMATS}")
        return {"json": self.save_json(articles, filename)}

    def append_json(
        self,
        articles: Sequence[ArticleRecord],
        filename: str = ACCUMULATED_FILENAME,
    ) -> Path:
        """Merge ``articles`` into an accumulated JSON file, skipping known URLs."""
        filepath = self._target(filename, "json")
        existing: Dict[str, object] = {"articles": []}
        if filepath.exists():
            try:
                existing = json.loads(filepath.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise StorageError(f"Failed to read {filepath}: {exc}") from exc
            if isinstance(existing, list):
                existing = {"articles": existing}
            elif not isinstance(existing, dict):
                raise StorageError(f"Unexpected JSON content in {filepath}")

        stored: List[dict] = list(existing.get("articles") or [])
        known_urls = {item.get("url") for item in stored}
        new_articles = [article for article in articles if article.url not in known_urls]
        stored.extend(article.to_dict() for article in new_articles)

        existing["articles"] = stored
        existing["lastUpdated"] = utc_timestamp()
        existing["totalArticles"] = len(stored)
        try:
            filepath.write_text(json.dumps(existing, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to save JSON: {exc}") from exc
        logger.info("Appended %d new articles to %s", len(new_articles), filepath)
        return filepath

    def load_json(self, filepath: Union[str, Path]) -> List[ArticleRecord]:
        try:
            data = json.loads(Path(filepath).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to load JSON: {exc}") from exc
        items = data.get("articles", []) if isinstance(data, dict) else data
        return [ArticleRecord.from_dict(item) for item in items]

    def clean_old_files(self, days_old: float = 7) -> int:
        """Delete files in the output directory older than ``days_old`` days."""
        self.ensure_output_dir()
        cutoff = time.time() - days_old * 24 * 60 * 60
        deleted = 0
        for path in self.output_dir.iterdir():
            if not path.is_file() or path.stat().st_mtime >= cutoff:
                continue
            try:
                path.unlink()
            except OSError as exc:
                logger.warning("Failed to delete %s: %s", path, exc)
                continue
            deleted += 1
            logger.info("Deleted old file: %s", path.name)
        if deleted:
            logger.info("Cleaned up %d old file(s)", deleted)
        return deleted
