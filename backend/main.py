from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from ai_service import GeminiModelClient
from controller import TranscriptController
from credentials import build_credential_store
from errors import ErrorKind, TranscriptError
from log_setup import setup_logging
from pipeline import TranscriptPipeline
from routes.transcript_route import router

logger = setup_logging(config.LOG_LEVEL, config.LOG_FILE)

ERROR_STATUS = {
    ErrorKind.LOCAL_INPUT: 400,
    ErrorKind.INVALID_CREDENTIAL: 401,
    ErrorKind.BUSY: 409,
    ErrorKind.EMPTY_RESPONSE: 502,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.CONFIGURATION: 503,
}


def build_controller() -> TranscriptController:
    store = build_credential_store(
        config.CREDENTIAL_SOURCE, config.CREDENTIAL_FILE, config.GEMINI_API_KEY_ENV
    )
    pipeline = TranscriptPipeline(GeminiModelClient(config.GEMINI_MODEL), config.TARGET_LANGUAGE)
    controller = TranscriptController(store, pipeline)

    fatal = controller.fatal_error()
    if fatal:
        logger.error(fatal)
    logger.info(
        f"Transcript refiner ready: model={config.GEMINI_MODEL}, "
        f"language={config.TARGET_LANGUAGE}, credential={store.source}"
    )
    return controller


# =========================================================
# APP SETUP
# =========================================================
def create_app(controller: Optional[TranscriptController] = None) -> FastAPI:
    app = FastAPI(title="Transcript Refiner")
    app.state.controller = controller or build_controller()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TranscriptError)
    async def transcript_error_handler(request: Request, exc: TranscriptError):
        state = request.app.state.controller.snapshot()
        return JSONResponse(
            status_code=ERROR_STATUS.get(exc.kind, 500),
            content={
                "detail": exc.message,
                "kind": exc.kind.value,
                "state": state.model_dump(mode="json"),
            },
        )

    app.include_router(router)
    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
    )


if __name__ == "__main__":
    run()
