import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resonance import __version__
from resonance.errors import InvalidTransition
from resonance.settings import settings
from resonance.utils.logging import configure_logging
from .routers import chat, topics

configure_logging(settings.log_level)

app = FastAPI(
    title="Résonance Backend",
    description="Conversation topics generated by Gemini, and a debate partner to discuss them.",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(topics.router)
app.include_router(chat.router)


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    logging.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
