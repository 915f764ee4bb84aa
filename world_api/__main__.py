import uvicorn

from world_api.core.config import settings

if __name__ == "__main__":
    uvicorn.run("world_api.main:app", host="0.0.0.0", port=8000, reload=settings.is_dev)
