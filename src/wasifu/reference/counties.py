"""County reference data provider.

Loads the ordered list of County records once; read-only afterwards and
safe to share across concurrent conversations.
"""

import json
import logging
from collections.abc import Iterator, Sequence
from importlib import resources
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from wasifu.core.errors import ReferenceDataError
from wasifu.core.types import County

logger = logging.getLogger(__name__)

PACKAGED_DATA = "counties.json"

_county_list = TypeAdapter(list[County])


class CountyDirectory:
    """Immutable, name-keyed view over County records.

    Lookups are case-sensitive, matching how county answers are stored.
    """

    def __init__(self, counties: Sequence[County]) -> None:
        by_name: dict[str, County] = {}
        for county in counties:
            if county.name in by_name:
                raise ReferenceDataError(f"Duplicate county name in reference data: {county.name}")
            by_name[county.name] = county
        self._counties = tuple(counties)
        self._by_name = by_name

    def find_by_name(self, name: str) -> County | None:
        """Return the county with exactly this name, or None."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [county.name for county in self._counties]

    def __iter__(self) -> Iterator[County]:
        return iter(self._counties)

    def __len__(self) -> int:
        return len(self._counties)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @classmethod
    def from_json(cls, raw: str | bytes, source: str = "<memory>") -> "CountyDirectory":
        """Parse a JSON array of county records.

        Raises:
            ReferenceDataError: If the payload is not valid JSON or a record is malformed
        """
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ReferenceDataError(f"Reference data in {source} is not valid JSON: {e}") from e

        if not isinstance(records, list) or not records:
            raise ReferenceDataError(f"Reference data in {source} must be a non-empty JSON array")

        try:
            counties = _county_list.validate_python(records)
        except PydanticValidationError as e:
            raise ReferenceDataError(f"Malformed county record in {source}: {e}") from e

        return cls(counties)


def load_counties(path: Path | str | None = None) -> CountyDirectory:
    """Load county reference data.

    Args:
        path: JSON file to read; None loads the packaged data set

    Returns:
        CountyDirectory with the records in source order

    Raises:
        ReferenceDataError: If the source is missing, unreadable or malformed
    """
    if path is None:
        source = f"wasifu.data/{PACKAGED_DATA}"
        raw = resources.files("wasifu.data").joinpath(PACKAGED_DATA).read_bytes()
    else:
        data_path = Path(path)
        source = str(data_path)
        try:
            raw = data_path.read_bytes()
        except OSError as e:
            raise ReferenceDataError(f"Cannot read reference data {data_path}: {e}") from e

    directory = CountyDirectory.from_json(raw, source=source)
    logger.info(f"Loaded {len(directory)} counties from {source}")
    return directory
