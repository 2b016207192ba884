"""Data types shared by the scanner, the catalog parser and the generator."""
import hashlib
from dataclasses import dataclass, field
from typing import Dict, Set

IDS_KEY_PREFIX = 'IDS_DEVTOOLS_'


@dataclass
class LocalizableString:
    """A UI string literal found in the frontend, with every place it was seen."""
    text: str
    source_locations: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class CatalogEntry:
    """A <message> registered in a .grd/.grdp file."""
    id_key: str
    text: str
    description: str = ''
    grdp_path: str = ''


# Insertion-ordered: the generated table is emitted in this order.
FrontendStringMap = Dict[str, LocalizableString]


def ids_key_for(text: str) -> str:
    """Return the stable IDS key for a frontend string."""
    return IDS_KEY_PREFIX + hashlib.md5(text.encode('utf-8')).hexdigest()
