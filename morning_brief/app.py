"""
HTTP trigger for the morning brief job.

GET /api/cron runs the pipeline once; GET /api/news serves the stored brief.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from .auth import is_authorized
from .config import Config, ConfigError, load_config, load_cron_secret
from .kv_store import KVStore, KVStoreError, read_daily_brief
from .pipeline import build_pipeline, run_pipeline


logger = logging.getLogger(__name__)

SUCCESS_HTML = (
    '<!DOCTYPE html><html><head><meta charset="utf-8"><title>뉴스 업데이트</title></head>'
    '<body style="font-family:sans-serif;max-width:32rem;margin:4rem auto;padding:1rem;text-align:center;">'
    "<h1>뉴스 업데이트 성공!</h1><p>{count}건이 반영되었습니다.</p></body></html>"
)

app = FastAPI(title="Morning Brief")


def _error_response(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
    logger.error(f"Configuration error: {exc}")
    return _error_response(str(exc))


def get_cron_secret() -> Optional[str]:
    return load_cron_secret()


def get_config_loader() -> Callable[[], Config]:
    return load_config


def get_config() -> Config:
    return load_config()


def get_pipeline_factory() -> Callable:
    return build_pipeline


def get_store(config: Config = Depends(get_config)) -> KVStore:
    url, token = config.require_kv()
    return KVStore(url, token, timeout=config.request_timeout)


@app.get("/api/cron")
def run_cron(
    secret: Optional[str] = None,
    authorization: Optional[str] = Header(default=None),
    cron_secret: Optional[str] = Depends(get_cron_secret),
    config_loader: Callable[[], Config] = Depends(get_config_loader),
    pipeline_factory: Callable = Depends(get_pipeline_factory),
):
    """Run the daily brief job. Requires the cron secret."""
    if not is_authorized(authorization, secret, cron_secret):
        return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        config = config_loader()
        config.require_api_key()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return _error_response(str(e))

    try:
        feed_source, client, store = pipeline_factory(config)
        brief = run_pipeline(feed_source, client, store)
    except Exception as e:
        logger.exception(f"Cron job error: {e}")
        return _error_response(str(e) or "Unknown error occurred")

    return HTMLResponse(SUCCESS_HTML.format(count=len(brief.news)), status_code=status.HTTP_200_OK)


@app.get("/api/news")
def get_news(store: KVStore = Depends(get_store)):
    """Return the cached daily brief."""
    try:
        brief = read_daily_brief(store)
    except KVStoreError as e:
        logger.error(f"Failed to read daily brief: {e}")
        return _error_response(str(e))

    if brief is None:
        return _error_response("No daily brief stored yet", status.HTTP_404_NOT_FOUND)
    return brief.to_dict()
