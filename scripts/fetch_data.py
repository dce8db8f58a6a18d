import logging
from pathlib import Path

import requests

from shootings.data_loader import (
    DATA_DIR,
    REQUEST_TIMEOUT,
    SNAPSHOT_FILE,
    SOURCE_URL,
    load_incident_data,
    request_headers,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 20


def download_snapshot(url: str = SOURCE_URL, path: Path = SNAPSHOT_FILE) -> Path:
    """Stream the incident CSV to ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    partial = path.with_suffix(path.suffix + ".part")

    with requests.get(
        url, headers=request_headers(), timeout=REQUEST_TIMEOUT, stream=True
    ) as response:
        response.raise_for_status()
        with open(partial, "wb") as handle:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                handle.write(chunk)

    partial.replace(path)
    return path


def main():
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    log.info("Downloading NYPD shooting incidents...")
    path = download_snapshot()

    incidents = load_incident_data(path)
    log.info("Wrote %s incidents to %s", f"{len(incidents):,}", path)
    log.info("Render offline with NYPD_SHOOTINGS_SOURCE=%s", path)


if __name__ == "__main__":
    main()
