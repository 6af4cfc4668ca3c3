"""
Bulk collection of patient records across pages.

Pages are requested one after another, never in parallel: the record
source rate-limits per key, so each page after the first is preceded by
a growing pause on top of the fetcher's own retry backoff. A page that
still fails is skipped; only a run that yields no records at all fails.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import List

from . import config
from .backoff import inter_page_delay
from .client import fetch_page
from .errors import CollectionExhausted, UpstreamError
from .models import PatientRecord

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    records: List[PatientRecord] = field(default_factory=list)
    failed_pages: List[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_pages

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def __getitem__(self, index):
        return self.records[index]


def collect(
    target_count=config.DEFAULT_TARGET,
    *,
    page_size=config.PAGE_SIZE,
    max_retries=config.BULK_PAGE_RETRIES,
    sleep=time.sleep,
    jitter=True,
    fetch=fetch_page,
) -> CollectionResult:
    """
    Gather up to `target_count` records.

    Returns whatever was collected, even if some pages failed. Raises
    CollectionExhausted when every page failed and nothing was collected.
    """
    if target_count < 1:
        raise ValueError(f"target_count must be at least 1, got {target_count}")

    page_count = math.ceil(target_count / page_size)
    result = CollectionResult()
    logger.info("Collecting %d patients across at most %d pages", target_count, page_count)

    for page in range(1, page_count + 1):
        if page > 1:
            delay = inter_page_delay(page, jitter=jitter)
            logger.info("Waiting %.1fs before page %d", delay, page)
            sleep(delay)

        limit = min(page_size, target_count - len(result.records))
        try:
            fetched = fetch(page, limit, max_retries, sleep=sleep, jitter=jitter)
        except UpstreamError as e:
            result.failed_pages.append(page)
            logger.warning(
                "Skipping page %d after error: %s (%d patients so far)",
                page, e, len(result.records),
            )
            continue

        result.records.extend(fetched.records)
        logger.info("Page %d: %d patients, %d total", page, len(fetched.records), len(result.records))

        if len(result.records) >= target_count or fetched.has_next is False:
            break

    if not result.records:
        raise CollectionExhausted(
            f"no patients collected (failed pages: {result.failed_pages})"
        )

    del result.records[target_count:]
    logger.info("Collection complete: %d patients", len(result.records))
    return result
