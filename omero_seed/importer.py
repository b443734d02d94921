"""Find sample images in the container and import them one by one."""

import logging
from typing import Dict, List, Sequence, Tuple

from .client import ObjectRef, OmeroCli
from .fixtures import ImportRule

logger = logging.getLogger(__name__)


def discover_files(
    client: OmeroCli, img_dir: str, rules: Sequence[ImportRule]
) -> List[Tuple[ImportRule, List[str]]]:
    """List the files each rule matches, in sorted order.

    Args:
        client: CLI client for the container
        img_dir: Directory searched recursively
        rules: Import rules, in import order

    Returns:
        (rule, files) pairs in the order of ``rules``
    """
    found = []
    for rule in rules:
        files = client.find_files(img_dir, rule.pattern)
        logger.info(f"  {rule.pattern}: {len(files)}")
        found.append((rule, files))
    return found


def import_files(
    client: OmeroCli,
    found: Sequence[Tuple[ImportRule, List[str]]],
    datasets: Dict[str, ObjectRef],
) -> Dict[str, List[str]]:
    """Import every discovered file into its rule's dataset.

    Stops at the first failing import.

    Returns:
        Imported file paths keyed by rule pattern
    """
    imported: Dict[str, List[str]] = {}
    for rule, files in found:
        dataset = datasets[rule.dataset]
        logger.info(f"Importing {rule.pattern} -> {dataset}")
        done = imported.setdefault(rule.pattern, [])
        for path in files:
            logger.info(f"  Import {path} -> {dataset}")
            result = client.import_file(path, dataset)
            if result.stdout.strip():
                logger.debug(result.stdout.strip())
            done.append(path)
    return imported
