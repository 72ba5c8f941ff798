"""Run the API server: ``python -m stock_categorizer``."""
import uvicorn

from .config import API_HOST, API_PORT


def main() -> None:
    uvicorn.run("stock_categorizer.main:app", host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
