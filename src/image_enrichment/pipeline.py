"""Processing pipeline orchestrating discovery, batching, endpoint calls, and JSON writing."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

from .errors import MissingContent
from .logging import get_logger
from .reader import iter_images
from .schemas import ItemOutcome, RunConfig, RunSummary
from .utils.clients import InferenceClient
from .utils.concurrency import ProgressTracker, partition, run_batch
from .utils.images import load_image_task
from .utils.paths import base_name_for
from .vlm import caption_tasks
from .writer import JSONOutputWriter

logger = get_logger(__name__)

Item = tuple[str, Path]


def plan_inputs(cfg: RunConfig, writer: JSONOutputWriter) -> tuple[list[Item], int, int]:
    """Return ``(pending, discovered, skipped)`` for a run.

    ``pending`` holds ``(base_name, path)`` pairs in file-name order. A file whose
    base name was already taken by an earlier file is dropped so that no two
    items write the same output path.
    """
    pending: list[Item] = []
    seen: set[str] = set()
    discovered = skipped = 0
    for path in iter_images(cfg.input_dir):
        discovered += 1
        base_name = base_name_for(path)
        if base_name in seen:
            logger.warning("skipping %s: output name %s already used by another image", path, base_name)
            skipped += 1
            continue
        seen.add(base_name)
        if cfg.skip_existing and writer.exists(base_name):
            logger.debug("skipping %s: %s exists", path, writer.path_for(base_name))
            skipped += 1
            continue
        pending.append((base_name, path))
    return pending, discovered, skipped


def process_images(
    cfg: RunConfig,
    client: InferenceClient | None = None,
    show_progress: bool = True,
) -> RunSummary:
    logger.info("🚀 start run model=%s input=%s output=%s", cfg.model, cfg.input_dir, cfg.target_dir)
    writer = JSONOutputWriter(cfg.target_dir, suffix=cfg.suffix, pretty=cfg.pretty_json)
    pending, discovered, skipped = plan_inputs(cfg, writer)
    logger.info("found %d images, %d to process, %d skipped", discovered, len(pending), skipped)

    batches = partition(pending, cfg.batch_size)
    own_client = client is None
    if client is None:
        client = InferenceClient(cfg.api_url, timeout=cfg.timeout)

    try:
        with ProgressTracker(len(pending), show=show_progress) as tracker:
            with ThreadPoolExecutor(max_workers=cfg.batch_size) as ex:
                for i, batch in enumerate(batches, 1):
                    logger.debug("batch %d/%d: %d image(s)", i, len(batches), len(batch))
                    if cfg.request_mode == "per-batch":
                        run_batch(partial(_process_group, client, cfg, writer), [batch], ex, tracker)
                    else:
                        run_batch(partial(_process_one, client, cfg, writer), batch, ex, tracker)
    finally:
        if own_client:
            client.close()

    summary = RunSummary(
        discovered=discovered,
        skipped=skipped,
        total=len(pending),
        succeeded=tracker.succeeded,
        failed=tracker.failed,
        batches=len(batches),
    )
    logger.info(
        "📊 done. %d/%d written, %d failed, %d skipped",
        summary.succeeded,
        summary.total,
        summary.failed,
        summary.skipped,
    )
    return summary


def _failed(path: Path, e: Exception) -> ItemOutcome:
    return ItemOutcome(source_path=path, error=f"{type(e).__name__}: {e}")


def _process_one(
    client: InferenceClient, cfg: RunConfig, writer: JSONOutputWriter, item: Item
) -> list[ItemOutcome]:
    return [_process_single(client, cfg, writer, *item)]


def _process_single(
    client: InferenceClient, cfg: RunConfig, writer: JSONOutputWriter, base_name: str, path: Path
) -> ItemOutcome:
    try:
        task = load_image_task(path, base_name)
        contents = caption_tasks(
            client,
            [task],
            cfg.model,
            prompt=cfg.prompt,
            schema=cfg.schema_obj,
            options=cfg.options,
        )
        if not contents:
            raise MissingContent(f"no content returned for {path}")
        if len(contents) > 1:
            logger.warning("got %d contents for %s, keeping the first", len(contents), path)
        out = writer.write(task.base_name, contents[0], structured=cfg.structured)
    except Exception as e:  # noqa: BLE001
        logger.error("failed processing %s: %s", path, e)
        return _failed(path, e)
    return ItemOutcome(source_path=path, output_path=out)


def _process_group(
    client: InferenceClient, cfg: RunConfig, writer: JSONOutputWriter, batch: list[Item]
) -> list[ItemOutcome]:
    """Caption a whole batch with one request, mapping contents back by position."""
    outcomes: list[ItemOutcome] = []
    tasks = []
    for base_name, path in batch:
        try:
            tasks.append(load_image_task(path, base_name))
        except Exception as e:  # noqa: BLE001
            logger.error("error encoding %s: %s", path, e)
            outcomes.append(_failed(path, e))
    if not tasks:
        return outcomes

    try:
        contents = caption_tasks(
            client,
            tasks,
            cfg.model,
            prompt=cfg.prompt,
            schema=cfg.schema_obj,
            options=cfg.options,
        )
    except Exception as e:  # noqa: BLE001
        logger.error("error processing batch: %s", e)
        return outcomes + [_failed(t.source_path, e) for t in tasks]

    if len(contents) > len(tasks):
        logger.warning("got %d contents for %d images, dropping the rest", len(contents), len(tasks))
    for i, task in enumerate(tasks):
        try:
            if i >= len(contents):
                raise MissingContent(f"no content returned for {task.source_path}")
            out = writer.write(task.base_name, contents[i], structured=cfg.structured)
        except Exception as e:  # noqa: BLE001
            logger.error("failed processing %s: %s", task.source_path, e)
            outcomes.append(_failed(task.source_path, e))
            continue
        outcomes.append(ItemOutcome(source_path=task.source_path, output_path=out))
    return outcomes
