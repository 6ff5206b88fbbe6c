"""Allow running the application with `python -m llmproxy`."""

from __future__ import annotations

import uvicorn


def main() -> None:
    uvicorn.run("llmproxy.main:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    main()
