from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cochef.core.logger import setup_logging
from cochef.routers import chat, recipes, users

setup_logging()

app = FastAPI(title="Gramz Co-chef API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with your specific domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router)
app.include_router(recipes.router)
app.include_router(users.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to Gramz, your co-chef"}
