from __future__ import annotations

from fastapi import FastAPI

from app.Config import config
from app.Http.Middleware import LocaleMiddleware
from bootstrap.application import create_app
from config import create_tables
from routes import posts_router

laravel_app = create_app()

app = FastAPI(
    title=config('app.name'),
    debug=config('app.debug', False),
)

app.add_middleware(LocaleMiddleware)
app.include_router(posts_router)


@app.on_event("startup")
async def startup_event() -> None:
    create_tables()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
