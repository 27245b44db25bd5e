import uvicorn

from coderoom.core.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run("coderoom.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
