"""Client-side route surface."""
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

HOME_PATH = "/"
NEW_DATASET_PATH = "/datasets/new"

NEW_DATASET = "new_dataset"
DATASET_DETAIL = "dataset_detail"
DATASET_EDIT = "dataset_edit"


class Route(NamedTuple):
    view: str
    dataset_id: Optional[int] = None
    tab: str = "data"


def parse_route(path: Optional[str]) -> Route:
    """Map a location to a view.

    The root redirects to the new-dataset form; unknown paths and
    non-numeric ids do the same. ``/datasets/<id>#edit`` opens the detail
    view on its edit tab.
    """
    parts = urlsplit(path or "")
    segments = [s for s in parts.path.split("/") if s]
    fragment = parts.fragment

    if len(segments) < 2 or segments[0] != "datasets" or segments[1] == "new":
        return Route(NEW_DATASET)
    try:
        dataset_id = int(segments[1])
    except ValueError:
        return Route(NEW_DATASET)
    if dataset_id <= 0:
        return Route(NEW_DATASET)

    if len(segments) > 2 and segments[2] == "edit":
        return Route(DATASET_EDIT, dataset_id, "edit")
    return Route(DATASET_DETAIL, dataset_id, "edit" if fragment == "edit" else "data")


def dataset_path(dataset_id: int, tab: Optional[str] = None) -> str:
    path = f"/datasets/{dataset_id}"
    if tab == "edit":
        path += "#edit"
    return path
