"""Run the codeask server: ``python -m codeask``."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "codeask.web.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
