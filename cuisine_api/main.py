import uvicorn

from .app import create_app
from .config import get_settings

settings = get_settings()
app = create_app(settings)


def main():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
