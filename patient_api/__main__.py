from __future__ import annotations

import uvicorn

from patient_api.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("patient_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
