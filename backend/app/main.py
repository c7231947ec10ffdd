from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.config import cors_origins
from backend.app.api.routes.achievements import router as achievements_router
from backend.app.api.routes.config import router as config_router
from backend.app.api.routes.progress import router as progress_router


app = FastAPI(title="SplitSave Progress API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(config_router)
app.include_router(progress_router)
app.include_router(achievements_router)
