import json
from datetime import datetime, timedelta, timezone

from newsarchive.models import Article
from newsarchive.storage import (
    ArchiveMetadata,
    ArchiveStore,
    JsonMetadataRepository,
    MemoryMetadataRepository,
    category_slug,
    read_article_csv,
)

from conftest import ARTICLE_URL, make_publisher

ICT = timezone(timedelta(hours=7))


def make_article(url=ARTICLE_URL, publish_time=None, category="kinh-doanh", content='Nội dung, có "dấu ngoặc"\nxuống dòng'):
    return Article(
        url=url,
        title="Giá vàng tăng mạnh",
        description="Mô tả",
        content=content,
        publish_time=publish_time or datetime(2024, 5, 20, 8, 0, tzinfo=ICT),
        author="Minh Anh",
        category=category,
    )


def test_save_writes_single_row_csv(tmp_path):
    store = ArchiveStore(make_publisher(), MemoryMetadataRepository(), base_dir=tmp_path)
    article = make_article()

    assert store.save(article) is True

    path = tmp_path / "news" / "kinh-doanh" / "2024" / "05" / "20240520080000123.csv"
    assert store.path_for(article) == path
    assert store.exists(article)
    row = read_article_csv(path)
    assert row["URL"] == ARTICLE_URL
    assert row["Content"] == article.content
    assert row["PublishTime"] == "2024-05-20T08:00:00+07:00"
    assert row["Category"] == "kinh-doanh"


def test_year_and_month_follow_publish_time_offset(tmp_path):
    store = ArchiveStore(make_publisher(), MemoryMetadataRepository(), base_dir=tmp_path)
    # 2024-06-01 00:30 in +07:00 is still May in UTC.
    article = make_article(publish_time=datetime(2024, 6, 1, 0, 30, tzinfo=ICT))

    assert store.path_for(article).parts[-3:-1] == ("2024", "06")


def test_second_save_is_a_no_op(tmp_path):
    store = ArchiveStore(make_publisher(), MemoryMetadataRepository(), base_dir=tmp_path)
    article = make_article()
    assert store.save(article)
    path = store.path_for(article)
    before = path.read_text(encoding="utf-8")

    assert store.save(make_article(content="changed")) is False
    assert path.read_text(encoding="utf-8") == before


def test_url_without_timestamp_is_not_stored(tmp_path):
    metadata = MemoryMetadataRepository()
    store = ArchiveStore(make_publisher(), metadata, base_dir=tmp_path)
    article = make_article(url="https://news.example.com/kinh-doanh/no-timestamp.htm")

    assert store.path_for(article) is None
    assert store.save(article) is False
    assert metadata.get().is_empty


def test_metadata_bounds_widen_on_save(tmp_path):
    metadata = MemoryMetadataRepository()
    store = ArchiveStore(make_publisher(), metadata, base_dir=tmp_path)
    newer = datetime(2024, 5, 20, 8, 0, tzinfo=ICT)
    older = datetime(2024, 1, 2, 9, 0, tzinfo=ICT)

    store.save(make_article(publish_time=newer))
    store.save(make_article(url="https://news.example.com/a/b-20240102090000456.htm", publish_time=older))
    store.save(make_article(url="https://news.example.com/a/c-20240301090000789.htm", publish_time=datetime(2024, 3, 1, tzinfo=ICT)))

    assert store.bounds == ArchiveMetadata(latest_publish_time=newer, oldest_publish_time=older)


def test_category_slug():
    assert category_slug("Kinh Doanh") == "kinh-doanh"
    assert category_slug("../etc") == "---etc"
    assert category_slug("") == "unknown"
    assert category_slug(None) == "unknown"


def test_json_metadata_round_trip_in_utc(tmp_path):
    path = tmp_path / "metadata_news.json"
    repo = JsonMetadataRepository(path)
    assert repo.get().is_empty

    latest = datetime(2024, 5, 20, 8, 0, tzinfo=ICT)
    oldest = datetime(2023, 11, 1, 6, 15, tzinfo=ICT)
    repo.put(ArchiveMetadata(latest_publish_time=latest, oldest_publish_time=oldest))

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored == {"latestPublishTime": "2024-05-20 01:00:00", "oldestPublishTime": "2023-10-31 23:15:00"}
    reloaded = JsonMetadataRepository(path).get()
    assert reloaded.latest_publish_time == latest
    assert reloaded.oldest_publish_time == oldest


def test_corrupt_metadata_reads_as_empty(tmp_path):
    path = tmp_path / "metadata_news.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonMetadataRepository(path).get().is_empty

    path.write_text(json.dumps({"latestPublishTime": "yesterday"}), encoding="utf-8")
    assert JsonMetadataRepository(path).get().is_empty

    path.write_text(
        json.dumps({"latestPublishTime": "2023-01-01 00:00:00", "oldestPublishTime": "2024-01-01 00:00:00"}),
        encoding="utf-8",
    )
    assert JsonMetadataRepository(path).get().is_empty


class FailingMetadataRepository(MemoryMetadataRepository):
    def put(self, metadata):
        raise OverflowError("date value out of range")


def test_metadata_failure_does_not_escape_save(tmp_path):
    store = ArchiveStore(make_publisher(), FailingMetadataRepository(), base_dir=tmp_path)
    article = make_article()

    assert store.save(article) is True
    assert store.exists(article)
    assert store.bounds.is_empty


def test_bounds_drop_sub_second_precision(tmp_path):
    path = tmp_path / "metadata_news.json"
    published = datetime(2024, 5, 20, 8, 0, 0, 123456, tzinfo=ICT)
    metadata = ArchiveMetadata().extended_with(published)

    assert metadata.latest_publish_time == published.replace(microsecond=0)

    JsonMetadataRepository(path).put(metadata)
    assert JsonMetadataRepository(path).get() == metadata
