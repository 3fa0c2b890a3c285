import uvicorn

from launchpad.configuration.config import settings


def main() -> None:
    uvicorn.run(
        "launchpad.api.app:create_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
    )


if __name__ == "__main__":
    main()
