"""Populate an OMERO server with the sample test data."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .client import ObjectRef, OmeroCli, image
from .fixtures import (
    DATASET_ANNOTATIONS,
    DATASET_NAMES,
    DATASET_TAG,
    DCTERMS_NS,
    IMAGE_EDGE_CASES,
    IMAGE_TAG,
    IMPORT_RULES,
    PROJECT_ANNOTATION,
    PROJECT_NAME,
    SCREENSHOT_IMAGES,
    SCREENSHOT_VALUES,
    MapAnnotationSpec,
)
from .importer import discover_files, import_files

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    """References to everything a run created."""

    datasets: Dict[str, ObjectRef] = field(default_factory=dict)
    project: Optional[ObjectRef] = None
    tags: Dict[str, ObjectRef] = field(default_factory=dict)
    map_annotations: Dict[str, ObjectRef] = field(default_factory=dict)
    imported: Dict[str, List[str]] = field(default_factory=dict)
    image_annotations: List[ObjectRef] = field(default_factory=list)
    searches: Dict[str, str] = field(default_factory=dict)

    @property
    def image_count(self) -> int:
        return sum(len(files) for files in self.imported.values())


def _date_string(when: datetime) -> str:
    # Same layout as date(1), e.g. "Mon Oct 19 13:51:02 CEST 2026"
    if when.tzinfo is None:
        when = when.astimezone()
    return when.strftime("%a %b %d %H:%M:%S %Z %Y")


class Seeder:
    """Issue the fixed creation/annotation/import sequence.

    Every step takes the references returned by earlier steps. Nothing is
    rolled back: a failing command raises CommandError and whatever was
    created so far stays on the server.
    """

    def __init__(
        self,
        client: OmeroCli,
        img_dir: str,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.img_dir = img_dir
        self.now = now
        self.result = SeedResult()

    def annotate(
        self, link_kind: str, parent: ObjectRef, spec: MapAnnotationSpec
    ) -> ObjectRef:
        """Create a MapAnnotation, link it to ``parent`` and fill in its values."""
        ann = self.client.new_map_annotation(spec.ns)
        self.client.link(link_kind, parent, ann)
        for key, value in spec.values:
            self.client.map_set(ann, key, value)
        return ann

    def create_datasets(self) -> Dict[str, ObjectRef]:
        for slot, name in DATASET_NAMES.items():
            self.result.datasets[slot] = self.client.new_dataset(name)
        logger.info(
            "Datasets: " + " ".join(str(ref) for ref in self.result.datasets.values())
        )
        return self.result.datasets

    def annotate_datasets(self):
        ds = self.result.datasets
        maps = self.result.map_annotations

        maps["MAP1"] = self.annotate(
            "DatasetAnnotationLink", ds["DS1"], DATASET_ANNOTATIONS["MAP1"]
        )

        tag = self.client.tag_create(DATASET_TAG)
        self.result.tags[DATASET_TAG] = tag
        self.client.link("DatasetAnnotationLink", ds["DS1"], tag)

        # DS2 gets linked to MAP1; MAP2 is created and filled but stays unlinked.
        map2 = DATASET_ANNOTATIONS["MAP2"]
        maps["MAP2"] = self.client.new_map_annotation(map2.ns)
        self.client.link("DatasetAnnotationLink", ds["DS2"], maps["MAP1"])
        for key, value in map2.values:
            self.client.map_set(maps["MAP2"], key, value)

        maps["MAP3"] = self.annotate(
            "DatasetAnnotationLink", ds["DS3"], DATASET_ANNOTATIONS["MAP3"]
        )

    def create_project(self) -> ObjectRef:
        project = self.client.new_project(PROJECT_NAME)
        self.result.project = project
        for dataset in self.result.datasets.values():
            self.client.link("ProjectDatasetLink", project, dataset)
        logger.info(f"Project: {project}")
        return project

    def annotate_project(self):
        self.result.map_annotations["MAP4"] = self.annotate(
            "ProjectAnnotationLink", self.result.project, PROJECT_ANNOTATION
        )

    def import_images(self) -> Dict[str, List[str]]:
        logger.info(f"=== Importing images from {self.img_dir} ===")
        found = discover_files(self.client, self.img_dir, IMPORT_RULES)
        self.result.imported = import_files(self.client, found, self.result.datasets)
        logger.info(f"Imported {self.result.image_count} files")
        return self.result.imported

    def annotate_images(self):
        """Annotate images by fixed id.

        Ids 1..12 are what a fresh server assigns to the sample imports.
        """
        tag = self.client.tag_create(IMAGE_TAG)
        self.result.tags[IMAGE_TAG] = tag

        for index in SCREENSHOT_IMAGES:
            spec = MapAnnotationSpec(
                (("date", _date_string(self.now())),) + SCREENSHOT_VALUES,
                ns=DCTERMS_NS,
            )
            ann = self.annotate("ImageAnnotationLink", image(index), spec)
            self.result.image_annotations.append(ann)
            self.client.link("ImageAnnotationLink", image(index), tag)

        for index, spec in IMAGE_EDGE_CASES:
            ann = self.annotate("ImageAnnotationLink", image(index), spec)
            self.result.image_annotations.append(ann)

    def search_today(self) -> Dict[str, str]:
        today = self.now().date().isoformat()
        searches = self.result.searches
        searches["Project"] = self.client.search("Project", today, today)
        searches["Dataset"] = self.client.search("Dataset", today, today)
        searches["Image"] = self.client.search("Image", today, today, date_type="import")
        for kind, output in searches.items():
            logger.info(f"{kind} created today:\n{output.rstrip()}")
        return searches

    def run(self, skip_import: bool = False) -> SeedResult:
        """Run the whole sequence.

        Args:
            skip_import: Leave out the file import; image annotations then
                refer to images that must already exist

        Returns:
            SeedResult with every created reference
        """
        self.create_datasets()
        self.annotate_datasets()
        self.create_project()
        self.annotate_project()
        if skip_import:
            logger.info("Skipping image import")
        else:
            self.import_images()
        self.annotate_images()
        self.search_today()
        logger.info("=== populate complete ===")
        return self.result
