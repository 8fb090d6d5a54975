"""Address nodes of an expanded JSON-LD tree by path."""

from typing import Tuple, Union

from .error import PathError

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


def locate(tree: Union[dict, list], path: Path) -> dict:
    """Return the node object found at `path` within `tree`.

    The returned dict is the node itself, so writes to it edit the tree in place.

    Args:
        tree: Expanded JSON-LD document (list of node objects) or node object
        path: Sequence of property keys and array indices

    Raises:
        PathError: If a segment is missing or does not fit the shape at that point

    """
    node = tree
    for depth, segment in enumerate(path):
        if isinstance(segment, int) and not isinstance(segment, bool):
            if not isinstance(node, list):
                raise PathError(
                    f"Cannot index {type(node).__name__} with {segment}",
                    path=path[: depth + 1],
                )
            if not 0 <= segment < len(node):
                raise PathError(f"Index {segment} out of range", path=path[: depth + 1])
        elif isinstance(segment, str):
            if not isinstance(node, dict):
                raise PathError(
                    f"Cannot look up key `{segment}` in {type(node).__name__}",
                    path=path[: depth + 1],
                )
            if segment not in node:
                raise PathError(f"Key `{segment}` not found", path=path[: depth + 1])
        else:
            raise PathError(f"Invalid path segment: {segment!r}", path=path)
        node = node[segment]

    if not isinstance(node, dict):
        raise PathError(f"Path does not address a node object: {path}", path=path)
    return node
