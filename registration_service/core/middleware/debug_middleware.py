from loguru import logger

async def debug_middleware(request, call_next):
    logger.debug(f"Request {request.method} {request.url}, Query params: {request.query_params}")
    response = await call_next(request)
    logger.debug(f"Response status: {response.status_code} for {request.method} {request.url.path}")
    return response
