"""Sample content written to the server by a seeding run."""

from dataclasses import dataclass
from typing import Optional, Tuple

DCTERMS_NS = "http://purl.org/dc/terms/"


@dataclass(frozen=True)
class MapAnnotationSpec:
    """Key/value pairs for one MapAnnotation, applied in order."""

    values: Tuple[Tuple[str, str], ...]
    ns: Optional[str] = DCTERMS_NS


@dataclass(frozen=True)
class ImportRule:
    """Import files matching ``pattern`` into the dataset in slot ``dataset``."""

    pattern: str
    dataset: str


def dcterms(contributor: str, subject: str, provenance: str) -> MapAnnotationSpec:
    return MapAnnotationSpec(
        (
            ("contributor", contributor),
            ("subject", subject),
            ("provenance", provenance),
        )
    )


DATASET_NAMES = {
    "DS1": "Dataset 1",
    "DS2": "Dataset 2",
    "DS3": "Dataset 3",
}

PROJECT_NAME = "Project"

DATASET_TAG = "TestTag"
IMAGE_TAG = "Screenshot"

DATASET_ANNOTATIONS = {
    "MAP1": dcterms("Test User", "Test images", "Screenshots"),
    "MAP2": dcterms("Anonymous", "Ontop Tutorial", "Screenshots"),
    "MAP3": dcterms("Caligula", "OMERO Mapping", "Screenshots"),
}

PROJECT_ANNOTATION = dcterms("Nophretete", "OMERO Ontology", "Test Data")

IMPORT_RULES = (
    ImportRule("*_14-*.png", "DS1"),
    ImportRule("*_15-*.png", "DS2"),
    ImportRule("*_16-*.png", "DS3"),
    ImportRule("*.ome.tif", "DS2"),  # OME-TIFFs with ROIs
)

# Images 1..10 get a dcterms annotation (plus a date) and the image tag
SCREENSHOT_IMAGES = range(1, 11)
SCREENSHOT_VALUES = (
    ("contributor", "Test User"),
    ("subject", "Unittest"),
)

# Odd namespaces and keys that metadata readers have to cope with
IMAGE_EDGE_CASES = (
    (12, MapAnnotationSpec((("annotator", "MrX"),), ns=None)),
    (11, MapAnnotationSpec((("sampletype", "screen"),), ns="www.openmicroscopy.org/ns/default")),
    (
        10,
        MapAnnotationSpec(
            (("Assay", "PRTSC"),),
            ns="hms.harvard.edu/omero/forms/kvdata/MPB Annotations/",
        ),
    ),
    (9, MapAnnotationSpec((("Assay", "Bruker"),), ns="/MouseCT/Skyscan/System")),
    (
        1,
        MapAnnotationSpec(
            (
                ("foo^bar", "bar"),
                ("$foo*bar#ba", "some**thing"),
                ("&*foo&^bar", "cool"),
            ),
            ns=None,
        ),
    ),
)
