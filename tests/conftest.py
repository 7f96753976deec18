"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import pytest_asyncio

from clinic_kb.corpus.loader import CorpusLoader
from clinic_kb.models.entry import KBEntry
from clinic_kb.search.engine import SearchEngine

EN_ENTRIES: list[dict[str, object]] = [
    {
        "id": "en-root-canal",
        "title": "Root canal treatment explained",
        "locale": "en",
        "tags": ["root-canal", "endodontics", "pricing"],
        "excerpt": "What happens during a root canal and how long it takes.",
        "body": "A root canal removes infected pulp and seals the tooth.",
        "updatedAt": "2024-05-01",
    },
    {
        "id": "en-implant",
        "title": "Dental implant costs",
        "locale": "en",
        "tags": ["implant", "pricing"],
        "excerpt": "Typical price ranges for single and multiple implants.",
        "body": "Implant pricing depends on bone grafting and the crown.",
        "updatedAt": "2024-06-12",
    },
    {
        "id": "en-whitening",
        "title": "Brighter smile options",
        "locale": "en",
        "tags": ["whitening", "pricing"],
        "excerpt": "In-chair and take-home options compared.",
        "body": "Professional bleaching lightens enamel safely.",
        "updatedAt": "2024-03-20",
    },
    {
        "id": "en-care",
        "title": "Whitening at home: what to know",
        "locale": "en",
        "tags": ["aftercare"],
        "excerpt": "Keeping results after a whitening session.",
        "body": "Avoid coffee and red wine for 48 hours.",
        "updatedAt": "2024-03-21",
    },
    {
        "id": "en-insurance",
        "title": "Insurance and payment plans",
        "locale": "en",
        "tags": ["insurance", "payment", "pricing"],
        "excerpt": "Which insurers we work with.",
        "body": "We offer interest-free payment plans.",
        "updatedAt": "2024-01-15",
    },
    {
        "id": "en-hours",
        "title": "Clinic opening hours",
        "locale": "en",
        "tags": ["hours", "location"],
        "excerpt": "Weekday and weekend hours.",
        "body": "Open Monday to Saturday, 9am to 6pm.",
        "updatedAt": "2024-02-02",
    },
]

ZH_ENTRIES: list[dict[str, object]] = [
    {
        "id": "zh-wisdom",
        "title": "智齿拔除须知",
        "locale": "zh",
        "tags": ["智齿"],
        "excerpt": "拔智齿前后需要注意的事项。",
        "body": "术后二十四小时内避免漱口。",
        "updatedAt": "2024-04-10",
    },
    {
        "id": "zh-root-canal",
        "title": "根管治疗介绍",
        "locale": "zh",
        "tags": ["根管治疗"],
        "excerpt": "根管治疗的流程与疗程。",
        "body": "根管治疗通常需要两到三次复诊。",
        "updatedAt": "2024-05-02",
    },
    {
        "id": "zh-parking",
        "title": "停车指南",
        "locale": "zh",
        "tags": ["停车"],
        "excerpt": "诊所附近的停车场。",
        "body": "地下停车场前两小时免费。",
        "updatedAt": "2024-02-03",
    },
]


def write_corpus(directory: Path, locale: str, records: list[object]) -> Path:
    """Write a locale corpus file and return its path."""
    path = directory / f"{locale}.json"
    path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
    return path


def make_entry(
    entry_id: str = "en-test",
    title: str = "Test entry",
    locale: str = "en",
    tags: list[str] | None = None,
    excerpt: str = "",
    body: str = "",
) -> KBEntry:
    return KBEntry(
        id=entry_id,
        title=title,
        locale=locale,
        tags=tags or [],
        excerpt=excerpt,
        body=body,
        updatedAt="2024-01-01",
    )


@pytest.fixture
def corpus_dir(tmp_path):
    """Directory holding en.json and zh.json sample corpora."""
    write_corpus(tmp_path, "en", EN_ENTRIES)
    write_corpus(tmp_path, "zh", ZH_ENTRIES)
    return tmp_path


@pytest_asyncio.fixture
async def loader(corpus_dir):
    """Corpus loader reading the sample corpora."""
    corpus_loader = CorpusLoader(str(corpus_dir))
    yield corpus_loader
    await corpus_loader.close()


@pytest_asyncio.fixture
async def engine(loader):
    """Search engine over the sample corpora with the built-in lexicon."""
    return SearchEngine(loader)
