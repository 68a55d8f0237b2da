from importlib import resources
from typing import List

from dbtypes.store import BUNDLED_DIR, PACKAGE, PROPERTIES_SUFFIX


def list_bundled_types() -> List[str]:
    """Return the names of the database types shipped with the package, sorted."""
    bundled = resources.files(PACKAGE).joinpath(BUNDLED_DIR)
    if not bundled.is_dir():
        return []
    return sorted(
        entry.name[: -len(PROPERTIES_SUFFIX)]
        for entry in bundled.iterdir()
        if entry.is_file() and entry.name.endswith(PROPERTIES_SUFFIX)
    )
