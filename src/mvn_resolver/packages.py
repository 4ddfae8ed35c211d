"""Downloaded packages and their extraction to a plain jar file."""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from mvn_resolver.exceptions import ExtractionError
from mvn_resolver.models import AAR, JAR


CLASSES_JAR = "classes.jar"


@dataclass(frozen=True)
class JarPackage:
    """A jar; written to disk unchanged."""

    data: bytes
    packaging = JAR

    def extract_jar_file(self, location: Path) -> None:
        location.write_bytes(self.data)


@dataclass(frozen=True)
class AarPackage:
    """An Android archive; the jar to keep is its `classes.jar` entry."""

    data: bytes
    packaging = AAR

    def extract_jar_file(self, location: Path) -> None:
        try:
            with zipfile.ZipFile(io.BytesIO(self.data)) as archive:
                payload = archive.read(CLASSES_JAR)
        except KeyError as exc:
            raise ExtractionError(f"{CLASSES_JAR} not found in aar for {location}") from exc
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as exc:
            raise ExtractionError(f"Corrupt aar for {location}: {exc}") from exc
        location.write_bytes(payload)


Packaging = Union[JarPackage, AarPackage]

# Candidate packagings, in the order the resolver tries them.
PACKAGE_TYPES: dict[str, type[JarPackage] | type[AarPackage]] = {
    AAR: AarPackage,
    JAR: JarPackage,
}


def package_for(packaging: str, data: bytes) -> Packaging:
    return PACKAGE_TYPES[packaging](data)
