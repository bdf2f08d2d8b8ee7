from __future__ import annotations

import csv
from pathlib import Path
from typing import List

from ..models import Article

CSV_HEADER = ["URL", "Title", "Description", "Content", "PublishTime", "Author", "Category"]


def article_row(article: Article) -> List[str]:
    return [
        article.url,
        article.title,
        article.description,
        article.content,
        article.publish_time.isoformat(),
        article.author,
        article.category,
    ]


def write_article_csv(path: Path, article: Article) -> None:
    """Write header plus exactly one data row.

    Opens with mode ``x`` so an existing file is never overwritten
    (``FileExistsError``).
    """
    with path.open("x", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        writer.writerow(CSV_HEADER)
        writer.writerow(article_row(article))


def read_article_csv(path: Path) -> dict:
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    if len(rows) != 2 or rows[0] != CSV_HEADER:
        raise ValueError(f"Not a single-article archive file: {path}")
    return dict(zip(rows[0], rows[1]))
