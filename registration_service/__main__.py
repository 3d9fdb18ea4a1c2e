import uvicorn

from registration_service.core.config import HOST, PORT, RELOAD

if __name__ == "__main__":
    uvicorn.run("registration_service.main:app", host=HOST, port=PORT, reload=RELOAD)
