from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ContentItem:
    """A node as seen at one revision.

    ``rating`` stays ``None`` until an extension attaches one during load or a
    submitted form carries one. ``values`` holds the submitted form values, empty
    for items built from storage.
    """
    nid: Optional[int]
    vid: Optional[int]
    type: str
    title: str = ''
    body: str = ''
    rating: Optional[int] = None
    values: Dict[str, Any] = field(default_factory=dict)
