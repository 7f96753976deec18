"""Quick check that both locale corpora load and how many entries survive validation."""

import asyncio
import sys

from clinic_kb.config import get_corpus_source
from clinic_kb.corpus.loader import CorpusLoader, CorpusLoadError
from clinic_kb.models.entry import Locale


async def _check() -> bool:
    source = get_corpus_source()
    print(f"Checking corpora at {source}...")
    loader = CorpusLoader(source)
    ok = True
    try:
        for locale in Locale:
            try:
                entries = await loader.load_corpus(locale)
            except CorpusLoadError as e:
                print(f"  {locale.value}: FAILED — {e} ({e.__cause__})")
                ok = False
                continue
            tags = {tag for entry in entries for tag in entry.tags}
            print(f"  {locale.value}: {len(entries)} entries, {len(tags)} distinct tags")
    finally:
        await loader.close()
    return ok


def main() -> None:
    """Load each locale corpus and exit non-zero if any fails."""
    if not asyncio.run(_check()):
        sys.exit(1)


if __name__ == "__main__":
    main()
